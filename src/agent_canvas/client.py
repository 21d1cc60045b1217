"""Agent invocation client -- one chat-model call per Agent or Search node.

Wraps the configured LangChain chat model. Provider errors of any kind come
back as ``InvocationError``; an empty answer is replaced with a fallback
text so downstream nodes always receive a payload.
"""
from langchain_core.messages import HumanMessage, SystemMessage

from agent_canvas.config import (
    API_KEY_VARS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    LLM_PROVIDER,
    get_api_key,
    get_llm,
)
from agent_canvas.errors import InvocationError
from agent_canvas.logger import get_logger, track
from agent_canvas.model import AgentConfig

log = get_logger("client")

NO_RESPONSE_TEXT = "No response generated."

SEARCH_INSTRUCTION = (
    "You are a search engine. Provide a concise summary of the search "
    "results for the user's query."
)

# Gemini grounding tool: the model runs a Google Search and cites the pages
GOOGLE_SEARCH_TOOL = {"google_search": {}}


def _response_text(response) -> str:
    """Pull plain text out of a chat model response.

    Gemini can return content as a list of parts instead of a string.
    """
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content.strip()
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts).strip()


def _format_sources(response) -> str:
    """Build the '*Sources: ...*' suffix from grounding metadata, if any."""
    metadata = getattr(response, "response_metadata", None) or {}
    grounding = metadata.get("grounding_metadata") or metadata.get("groundingMetadata") or {}
    chunks = grounding.get("grounding_chunks") or grounding.get("groundingChunks") or []

    links = []
    for chunk in chunks:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if web and web.get("uri") and web.get("title"):
            links.append(f"[{web['title']}]({web['uri']})")

    if not links:
        return ""
    return f"\n\n*Sources: {', '.join(links)}*"


class AgentClient:
    """Turns a prompt plus an agent configuration into generated text."""

    def __init__(self, provider: str = None, llm_factory=None):
        self.provider = (provider or LLM_PROVIDER).lower()
        self._llm_factory = llm_factory or (
            lambda model, temperature: get_llm(model, temperature, provider=self.provider)
        )

    def _check_credentials(self):
        try:
            api_key = get_api_key(self.provider)
        except ValueError as e:
            raise InvocationError(str(e)) from e
        if not api_key:
            var = API_KEY_VARS[self.provider]
            raise InvocationError(
                f"API Key is missing. Set {var} in your environment or .env file."
            )

    def invoke(self, prompt: str, config: AgentConfig) -> str:
        """Generate a reply to prompt using config's model, instruction and temperature."""
        self._check_credentials()

        if config.use_search and self.provider != "google":
            raise InvocationError(
                f"Search grounding needs the google provider (current: {self.provider})"
            )

        model = config.model or DEFAULT_MODEL
        temperature = DEFAULT_TEMPERATURE if config.temperature is None else config.temperature

        messages = []
        if config.system_instruction:
            messages.append(SystemMessage(content=config.system_instruction))
        messages.append(HumanMessage(content=prompt))

        kwargs = {"tools": [GOOGLE_SEARCH_TOOL]} if config.use_search else {}

        log.debug(
            f"Calling {model} (temperature={temperature}, search={config.use_search})",
            extra={"node": "client"},
        )
        track("llm_calls")
        try:
            llm = self._llm_factory(model=model, temperature=temperature)
            response = llm.invoke(messages, **kwargs)
        except Exception as e:
            log.error(f"Generation API error: {e}", extra={"node": "client"})
            raise InvocationError(str(e) or "Failed to call the generation API") from e

        text = _response_text(response) or NO_RESPONSE_TEXT
        return text + _format_sources(response)

    def search(self, query: str) -> str:
        """Answer query with a grounded, summarised web search."""
        track("search_calls")
        return self.invoke(
            query,
            AgentConfig(
                model=DEFAULT_MODEL,
                system_instruction=SEARCH_INSTRUCTION,
                use_search=True,
            ),
        )
