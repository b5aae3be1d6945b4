import logging

import numpy as np

from kexpfam import GaussianKernel, LiteEstimator, ParallelConfig

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

rng = np.random.default_rng(1)

# banana-shaped data, one point per column
z = rng.standard_normal((2, 300))
X = np.vstack([z[0], z[1] + 0.5 * z[0] ** 2 - 1.0])

est = LiteEstimator(X, GaussianKernel(sigma=2.0), lmbda=1e-3, parallel=ParallelConfig(n_jobs=-1))
est.fit()
print("training objective:", est.objective())

grid = np.linspace(-3, 3, 5)
G = np.array(np.meshgrid(grid, grid)).reshape(2, -1)
est.set_test_data(G)
print("log density on grid:\n", est.log_pdf().reshape(5, 5))
