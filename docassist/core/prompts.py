from typing import List

QA_SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based on the user's uploaded documents. "
    "Use the context provided to give accurate, contextual answers. "
    "If the answer cannot be found in the documents, say so clearly."
)


def generate_qa_user_prompt(context: str, question: str) -> str:
    """
    Generate the user message for document question answering.

    Args:
        context: Concatenated document context.
        question: The user's question.

    Returns:
        The formatted prompt string.
    """
    return f"{context}\n\nQuestion: {question}"


def generate_resume_questions_system_prompt(question_count: int = 30) -> str:
    """
    Generate the system prompt for resume interview question generation.

    Category quotas are a hint to the model; the count is enforced by parsing.
    """
    return (
        "You are an expert interview question generator. Based on the resume content provided, "
        f"generate exactly {question_count} relevant interview questions.\n\n"
        "The questions should cover:\n"
        "- Technical skills and experience (about 10 questions)\n"
        "- Behavioral and situational questions (about 8 questions)\n"
        "- Problem-solving and analytical thinking (about 5 questions)\n"
        "- Leadership and teamwork (about 4 questions)\n"
        "- Career goals and motivation (about 3 questions)\n\n"
        f"IMPORTANT: Return ONLY a numbered list from 1 to {question_count}. Each line should start with "
        "the number followed by a period and space, then the question. Do not include any headers, "
        "explanations, or additional text.\n\n"
        "Example format:\n"
        "1. What programming languages are you most proficient in?\n"
        "2. Tell me about a challenging project you worked on.\n"
        "3. How do you handle tight deadlines?\n\n"
        f"Generate {question_count} questions based on this resume:"
    )


def generate_resume_questions_user_prompt(resume_context: str, question_count: int = 30) -> str:
    return (
        f"{resume_context}\n\n"
        f"Generate exactly {question_count} interview questions based on this resume content."
    )


def generate_backfill_system_prompt(missing_count: int) -> str:
    return (
        f"Generate {missing_count} additional interview questions based on the resume. "
        "Return only numbered questions, one per line."
    )


def generate_backfill_user_prompt(resume_context: str, missing_count: int, existing: List[str]) -> str:
    """
    Generate the user message for a backfill request.

    Args:
        resume_context: The resume-only context.
        missing_count: How many more questions are needed.
        existing: Questions already produced (used as a duplicate-avoidance hint).
    """
    seen = "\n".join(f"{i}. {q}" for i, q in enumerate(existing, 1))
    return (
        f"{resume_context}\n\n"
        f"Generate {missing_count} more interview questions. "
        f"Do not repeat these existing questions:\n{seen}"
    )
