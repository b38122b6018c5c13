from functools import cache
from pathlib import Path

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


@cache
def load_prompt(name: str, prompt_dir: Path = _DEFAULT_PROMPT_DIR) -> str:
    """Load a bundled prompt template by name (without the .txt suffix).

    Raises:
        FileNotFoundError: if no such template exists.
    """
    path = prompt_dir / f"{name}.txt"
    return path.read_text(encoding="utf-8").strip()
