"""
AI assistant services.

Architecture:
- context_builder.py: Document context assembly
- resume_classifier.py: Heuristic resume detection
- llm_service.py: Provider calls with transient-error retry
- rag_service.py: Question answering and chat sessions
- question_generator.py: Resume interview question generation
- question_parser.py: Numbered-list parsing
- report_generator.py: Plain-text question reports
"""

from .context_builder import ContextBuilder
from .resume_classifier import ResumeClassifier
from .llm_service import LLMService
from .rag_service import RAGService, ChatSession
from .question_generator import QuestionGeneratorService
from .question_parser import parse_questions
from .report_generator import ReportGenerator

__all__ = [
    'ContextBuilder',
    'ResumeClassifier',
    'LLMService',
    'RAGService',
    'ChatSession',
    'QuestionGeneratorService',
    'parse_questions',
    'ReportGenerator',
]
