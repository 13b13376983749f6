from .prompt_builder import PromptBuilder, render_file_block
from .generation_prompts import build_fix_prompt, build_generation_prompt
from .error_context import collect_code_context, find_affected_path

__all__ = [
    "PromptBuilder",
    "render_file_block",
    "build_generation_prompt",
    "build_fix_prompt",
    "find_affected_path",
    "collect_code_context",
]
