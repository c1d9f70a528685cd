"""
Services module - the assistant's request pipeline.

- assistant_service: one request/response cycle (entry point)
- command_dispatcher: routes TypedCommands to handlers
- command_handlers: per-route execution against the knowledge base
- conversation_context_service: per-session history
- response_formatter: user-facing text
"""
