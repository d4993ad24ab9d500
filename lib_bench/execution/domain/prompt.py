"""Prompt construction for a condition."""


def build_prompt(task_prompt: str, suffix: str) -> str:
    return task_prompt + suffix
