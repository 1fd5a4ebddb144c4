# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Updated: 2026-03-14
# Description: Config
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass
from dotenv import load_dotenv, find_dotenv

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True), override=True)


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_float(name: str, default: float) -> float:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be a float, got {v!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name, "")
    if v == "":
        return default
    v = v.lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    raise RuntimeError(f"Env var {name} must be a boolean, got {v!r}")


@dataclass(frozen=True)
class Config:
    # OpenAI (embeddings + chat)
    openai_api_key: str
    openai_base_url: str = ""
    openai_embed_model: str = "text-embedding-3-large"
    openai_chat_model: str = "gpt-4-0125-preview"

    # Persona
    user_first_name: str = "User"

    # Vault layout
    vault_dir: str = "."
    observations_file: str = "observations.md"
    embeddings_file: str = "observation_embeddings.json"

    # Refresh pipeline
    debounce_seconds: float = 10.0
    embed_timeout_seconds: float = 30.0
    embed_concurrency: int = 8
    embed_max_retries: int = 2
    embed_dimensions: int = 0  # 0 = model default
    full_rebuild: bool = False

    # Retrieval
    top_k: int = 5

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        # OpenAI
        "openai_api_key": "OPENAI_API_KEY",
        "openai_base_url": "OPENAI_BASE_URL",      # e.g. https://api.openai.com/v1
        "openai_embed_model": "OPENAI_EMBED_MODEL",
        "openai_chat_model": "OPENAI_CHAT_MODEL",

        # Persona
        "user_first_name": "COMPANION_USER_FIRST_NAME",

        # Vault
        "vault_dir": "COMPANION_VAULT_DIR",
        "observations_file": "COMPANION_OBSERVATIONS_FILE",
        "embeddings_file": "COMPANION_EMBEDDINGS_FILE",

        # Refresh pipeline
        "debounce_seconds": "COMPANION_DEBOUNCE_SECONDS",
        "embed_timeout_seconds": "COMPANION_EMBED_TIMEOUT_SECONDS",
        "embed_concurrency": "COMPANION_EMBED_CONCURRENCY",
        "embed_max_retries": "COMPANION_EMBED_MAX_RETRIES",
        "embed_dimensions": "COMPANION_EMBED_DIMENSIONS",
        "full_rebuild": "COMPANION_FULL_REBUILD",

        # Retrieval
        "top_k": "COMPANION_TOP_K",
    }

    # Convenient *groups* for use in tests / health checks
    OPENAI_ENV_VARS = (
        "OPENAI_API_KEY",
    )

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables."""
        defaults = Config.__dataclass_fields__
        env = Config.ENV_VARS

        def _str(field_name: str) -> str:
            return _env(env[field_name], defaults[field_name].default if field_name != "openai_api_key" else "")

        return Config(
            openai_api_key=_str("openai_api_key"),
            openai_base_url=_str("openai_base_url"),
            openai_embed_model=_str("openai_embed_model"),
            openai_chat_model=_str("openai_chat_model"),
            user_first_name=_str("user_first_name"),
            vault_dir=_str("vault_dir"),
            observations_file=_str("observations_file"),
            embeddings_file=_str("embeddings_file"),
            debounce_seconds=_env_float(env["debounce_seconds"], 10.0),
            embed_timeout_seconds=_env_float(env["embed_timeout_seconds"], 30.0),
            embed_concurrency=_env_int(env["embed_concurrency"], 8),
            embed_max_retries=_env_int(env["embed_max_retries"], 2),
            embed_dimensions=_env_int(env["embed_dimensions"], 0),
            full_rebuild=_env_bool(env["full_rebuild"], False),
            top_k=_env_int(env["top_k"], 5),
        )

    def __post_init__(self):
        """
        Fail fast if the API key is missing or a tunable is out of range.
        """
        if not self.openai_api_key:
            raise ValueError(f"Missing required environment variables: {[self.ENV_VARS['openai_api_key']]}")

        if self.debounce_seconds < 0:
            raise ValueError(f"{self.ENV_VARS['debounce_seconds']} must be >= 0")
        if self.embed_timeout_seconds <= 0:
            raise ValueError(f"{self.ENV_VARS['embed_timeout_seconds']} must be > 0")
        if self.embed_concurrency < 1:
            raise ValueError(f"{self.ENV_VARS['embed_concurrency']} must be >= 1")
        if self.embed_max_retries < 0:
            raise ValueError(f"{self.ENV_VARS['embed_max_retries']} must be >= 0")
        if self.embed_dimensions < 0:
            raise ValueError(f"{self.ENV_VARS['embed_dimensions']} must be >= 0")
        if self.top_k < 1:
            raise ValueError(f"{self.ENV_VARS['top_k']} must be >= 1")

    @property
    def observations_path(self) -> str:
        return os.path.join(self.vault_dir, self.observations_file)

    @property
    def embeddings_path(self) -> str:
        return os.path.join(self.vault_dir, self.embeddings_file)

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "openai_base_url": self.openai_base_url or "https://api.openai.com/v1",
            "openai_embed_model": self.openai_embed_model,
            "openai_chat_model": self.openai_chat_model,
            "user_first_name": self.user_first_name,
            "observations_path": self.observations_path,
            "embeddings_path": self.embeddings_path,
            "debounce_seconds": self.debounce_seconds,
            "embed_concurrency": self.embed_concurrency,
            "embed_dimensions": self.embed_dimensions or None,
            "full_rebuild": self.full_rebuild,
            "top_k": self.top_k,
        }
