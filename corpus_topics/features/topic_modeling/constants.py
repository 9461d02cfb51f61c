"""
Topic Modeling Constants and Configuration

This module defines defaults and numerical limits for the LDA engine.
"""

from typing import Tuple

# ===========================
# Module Version
# ===========================
TOPIC_MODELING_MODULE_VERSION = "0.1.0"

# ===========================
# Default LDA Parameters
# ===========================
DEFAULT_NUM_TOPICS = 5
"""Default number of topics to discover"""

DEFAULT_RANDOM_STATE = 1234
"""Random seed for reproducibility"""

DEFAULT_METHOD = "vem"
"""Inference method: 'vem' (variational EM) or 'gibbs' (collapsed Gibbs)"""

SUPPORTED_METHODS: Tuple[str, ...] = ("vem", "gibbs")

DEFAULT_PRIOR = "symmetric"
"""Symmetric prior: 1 / num_topics for both alpha and eta"""

DEFAULT_MAX_ITERATIONS = 200
"""EM iterations (vem) or full sampling sweeps (gibbs)"""

DEFAULT_TOL = 1e-6
"""Relative ELBO improvement below which variational EM stops"""

DEFAULT_E_STEP_MAX_ITER = 100
"""Per-document gamma updates within one E-step"""

DEFAULT_E_STEP_TOL = 1e-4
"""Mean absolute gamma change below which a document's E-step stops"""

DEFAULT_CHUNKSIZE = 256
"""Documents per E-step chunk; fixed so results do not depend on worker count"""

DEFAULT_TOP_N = 10
"""Top terms listed per topic"""

# ===========================
# Limits
# ===========================
MAX_TOPICS = 1000
"""Upper bound on the number of topics accepted by the engine"""

# ===========================
# Numerical Stability
# ===========================
LAMBDA_INIT_SHAPE = 100.0
"""Gamma(shape, 1/shape) initialisation for topic-word variational parameters"""

PHI_NORM_EPSILON = 1e-100
"""Added to per-token normalisers to avoid division by zero"""

# ===========================
# Model Persistence
# ===========================
MODEL_INFO_FILENAME = "model_info.json"
TOPIC_TABLE_FILENAME = "topic_models.csv"
BETA_FILENAME = "topic_term_beta.csv"
THETA_FILENAME = "document_topic_theta.csv"
