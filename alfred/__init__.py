"""
Alfred - natural-language front end for a task/note/project knowledge base.

Request flow:
    text -> IntentClassifier -> CommandExtractor -> CommandDispatcher
         -> ResponseFormatter -> display text

Build the core once per process with
``alfred.services.assistant_service.build_assistant_service()``.
"""

__version__ = "0.1.0"
