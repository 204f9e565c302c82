"""System prompt for commit message drafting."""

SYSTEM_PROMPT = (
    "You are a helpful assistant specialized in writing concise, "
    "expressive git commit messages."
)
