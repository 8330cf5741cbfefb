from pathlib import Path

from portfolio_review.interpretation.exceptions import InterpretationError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def _read(path: Path, what: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InterpretationError(f"Failed to load {what}: {exc}") from exc


def load_system_prompt(path: Path | None = None) -> str:
    """Load the system prompt describing the analyst's task.

    Raises:
        InterpretationError: if the file cannot be read.
    """
    return _read(path or _DEFAULT_PROMPT_DIR / "system_prompt.txt", "system prompt")


def load_prompt_template(path: Path | None = None) -> str:
    """Load the user prompt template containing a ``{portfolio_text}`` placeholder.

    Raises:
        InterpretationError: if the file cannot be read or lacks the placeholder.
    """
    template = _read(
        path or _DEFAULT_PROMPT_DIR / "analysis_prompt.txt", "prompt template"
    )
    if "{portfolio_text}" not in template:
        raise InterpretationError("Prompt template is missing the {portfolio_text} placeholder")
    return template
