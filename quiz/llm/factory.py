"""LLM Client Factory - Opcoes do Claude Agent SDK e chamada de texto simples."""

from claude_agent_sdk import ClaudeAgentOptions
from claude_agent_sdk import query as sdk_query

from core.logger import get_logger

from ..prompts import INTENT_SYSTEM_PROMPT, QUIZ_SYSTEM_PROMPT

logger = get_logger("quiz.llm")


class LLMClientFactory:
    """Factory para criar ClaudeAgentOptions com configuracao consistente.

    Todas as chamadas do bot sao de um turno, sem ferramentas: o modelo so
    devolve texto.

    Example:
        >>> options = LLMClientFactory.create_quiz_options("haiku")
        >>> text = await LLMClientFactory.complete_text("Create 3 ...", options)
    """

    DEFAULT_MODEL = "haiku"  # Rapido e economico
    QUALITY_MODEL = "opus"

    @staticmethod
    def create_options(system_prompt: str, model: str = DEFAULT_MODEL) -> ClaudeAgentOptions:
        """Cria opcoes para uma chamada de texto sem ferramentas.

        Args:
            system_prompt: Prompt de sistema
            model: Alias do modelo (haiku, sonnet, opus)
        """
        return ClaudeAgentOptions(
            model=model,
            system_prompt=system_prompt,
            allowed_tools=[],
            max_turns=1,
        )

    @classmethod
    def create_quiz_options(cls, model: str = DEFAULT_MODEL) -> ClaudeAgentOptions:
        return cls.create_options(QUIZ_SYSTEM_PROMPT, model)

    @classmethod
    def create_intent_options(cls, model: str = DEFAULT_MODEL) -> ClaudeAgentOptions:
        return cls.create_options(INTENT_SYSTEM_PROMPT, model)

    @staticmethod
    async def complete_text(prompt: str, options: ClaudeAgentOptions) -> str:
        """Executa query() e concatena os blocos de texto da resposta."""
        text = ""
        async for message in sdk_query(prompt=prompt, options=options):
            if hasattr(message, "content") and isinstance(message.content, list):
                for block in message.content:
                    if hasattr(block, "text"):
                        text += block.text

        logger.debug(f"Resposta LLM: {len(text)} caracteres")
        return text.strip()
