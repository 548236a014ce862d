"""Default configuration values."""

DEFAULT_MODEL = "google/gemini-3-flash-preview"

# OpenRouter (model provider and pricing source)
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_MODELS_URL = f"{OPENROUTER_BASE_URL}/models"
OPENROUTER_API_KEY_ENV = "OPENROUTER_API_KEY"
PRICING_FETCH_TIMEOUT_SECONDS = 10.0

# Parallel web search/extract
PARALLEL_BASE_URL = "https://api.parallel.ai"
PARALLEL_API_KEY_ENV = "PARALLEL_API_KEY"
PARALLEL_BETA_HEADER = "search-extract-2025-10-10"
SEARCH_TIMEOUT_SECONDS = 30.0
SEARCH_MAX_RESULTS = 10

# Search/extract pricing (USD)
SEARCH_COST_PER_REQUEST = 0.005  # covers SEARCH_RESULTS_PER_REQUEST results
SEARCH_RESULTS_PER_REQUEST = 10
SEARCH_COST_PER_EXTRA_RESULT = 0.001
EXTRACT_COST_PER_URL = 0.001

# Result count assumed for search cost before the real count is known
DEFAULT_SEARCH_RESULT_ESTIMATE = 10

# Message reconciliation
SIGNATURE_PREFIX_LENGTH = 200

# Model identifier suffixes that select a variant of a base model
MODEL_VARIANT_SEPARATOR = ":"
