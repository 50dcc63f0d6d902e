from .user import User
from .question import Question
from .lesson import LearnTopic, ChapterOverview

__all__ = ['User', 'Question', 'LearnTopic', 'ChapterOverview']
