"""Notion knowledge-base backend."""

from alfred.environments.notion.client import NotionKnowledgeBase

__all__ = ["NotionKnowledgeBase"]
