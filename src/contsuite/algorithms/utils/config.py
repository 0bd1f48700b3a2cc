import numpy as np

# Algorithm parameters
TOL = 1e-8
MAX_ITERS = 20

FASTMATH = False  # Global flag for Numba's fastmath option 

# Finite differences
MACHINE_EPS = float(np.finfo(np.float64).eps)
FD_EPS = float(np.sqrt(MACHINE_EPS))  # Relative forward-difference step

# Linear solves
RCOND_MIN = MACHINE_EPS  # Reciprocal condition number below which a matrix is treated as singular
GMRES_RTOL = 1e-12
