"""Prompt compilation for documentation requests."""

from .builder import PromptCompiler, compile_prompt

__all__ = ["PromptCompiler", "compile_prompt"]
