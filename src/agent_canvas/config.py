"""Configuration management for the workflow engine."""
import os
from dotenv import load_dotenv

load_dotenv(override=True)

# LLM configuration
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "google")
DEFAULT_MODEL = os.getenv("LLM_MODEL", "gemini-2.5-flash")
DEFAULT_TEMPERATURE = float(os.getenv("DEFAULT_TEMPERATURE", "0.7"))

# Pause after a node turns Running so a watching UI can show it (0 disables)
PACING_DELAY = float(os.getenv("PACING_DELAY", "0.1"))

# Max node executions per run
MAX_STEPS = int(os.getenv("MAX_STEPS", "1000"))

# Log level
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Output directory for run reports
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "output")

# Credential variable per provider; ollama runs locally without one
API_KEY_VARS = {
    "google": "GOOGLE_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "ollama": None,
}


def get_api_key(provider: str = None):
    """Read the provider credential from the environment at call time."""
    provider = (provider or LLM_PROVIDER).lower()
    if provider not in API_KEY_VARS:
        raise ValueError(
            f"Unsupported LLM_PROVIDER: '{provider}'. "
            "Use google, openai, anthropic, or ollama."
        )
    var = API_KEY_VARS[provider]
    if var is None:
        return "local"
    return os.getenv(var)


def get_llm(model: str = None, temperature: float = DEFAULT_TEMPERATURE, provider: str = None):
    """Factory function to create a chat model based on LLM_PROVIDER.

    Supports google, openai, anthropic, and ollama providers.
    Install the corresponding langchain package for your chosen provider.
    """
    provider = (provider or LLM_PROVIDER).lower()
    model = model or DEFAULT_MODEL

    if provider == "google":
        from langchain_google_genai import ChatGoogleGenerativeAI
        return ChatGoogleGenerativeAI(
            model=model,
            temperature=temperature,
            google_api_key=get_api_key(provider),
        )

    elif provider == "openai":
        try:
            from langchain_openai import ChatOpenAI
        except ImportError:
            raise ImportError("Install langchain-openai: pip install 'agent-canvas[openai]'")
        return ChatOpenAI(model=model, temperature=temperature)

    elif provider == "anthropic":
        try:
            from langchain_anthropic import ChatAnthropic
        except ImportError:
            raise ImportError("Install langchain-anthropic: pip install 'agent-canvas[anthropic]'")
        return ChatAnthropic(model=model, temperature=temperature)

    elif provider == "ollama":
        try:
            from langchain_ollama import ChatOllama
        except ImportError:
            raise ImportError("Install langchain-ollama: pip install 'agent-canvas[ollama]'")
        return ChatOllama(model=model, temperature=temperature)

    else:
        raise ValueError(
            f"Unsupported LLM_PROVIDER: '{provider}'. "
            "Use google, openai, anthropic, or ollama."
        )
