"""
AI Module - language understanding for the assistant.

    providers/   LLM vendor clients behind one AIProvider interface
    prompts/     classifier prompt templates
    intent/      classification (LLM) and command extraction (rules)
    monitoring   in-memory metrics for provider calls
"""
