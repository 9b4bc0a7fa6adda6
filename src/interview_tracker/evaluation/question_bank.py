"""Static questions served when the AI backend cannot generate any."""

from typing import Any, Dict, List

from interview_tracker.core.models import QuestionSpec

FALLBACK_QUESTIONS: Dict[str, Dict[str, List[Dict[str, Any]]]] = {
    "Frontend Developer": {
        "Technical": [
            {
                "question": "Explain the concept of virtual DOM in React and how it improves performance.",
                "type": "technical",
                "difficulty": "medium",
                "time_limit": 300,
                "sample_answer": "Virtual DOM is a programming concept where a virtual representation of the UI is kept in memory..."
            },
            {
                "question": "What are the key differences between let, const, and var in JavaScript?",
                "type": "technical",
                "difficulty": "easy",
                "time_limit": 180,
                "sample_answer": "let allows reassignment and has block scope, const is for constants with block scope..."
            }
        ],
        "Behavioral": [
            {
                "question": "Tell me about a time you had to work with a difficult team member.",
                "type": "behavioral",
                "difficulty": "medium",
                "time_limit": 240,
                "sample_answer": "In my previous project, I worked with a team member who had different coding standards..."
            }
        ]
    },
    "Backend Developer": {
        "Technical": [
            {
                "question": "How would you design a REST API for paginated search results?",
                "type": "technical",
                "difficulty": "medium",
                "time_limit": 300,
                "sample_answer": "Accept page and limit parameters, return items with total counts and links..."
            },
            {
                "question": "When would you choose a document database over a relational database?",
                "type": "technical",
                "difficulty": "medium",
                "time_limit": 240,
                "sample_answer": "Document stores suit flexible schemas and nested data read together..."
            }
        ],
        "Behavioral": [
            {
                "question": "Describe a production incident you helped resolve and what you learned.",
                "type": "behavioral",
                "difficulty": "medium",
                "time_limit": 240,
                "sample_answer": "Describe the impact, the investigation, the fix and the follow-up actions..."
            }
        ]
    },
    "Data Scientist": {
        "Technical": [
            {
                "question": "Explain the difference between precision and recall, and when you would favour each.",
                "type": "technical",
                "difficulty": "easy",
                "time_limit": 180,
                "sample_answer": "Precision is the share of predicted positives that are correct, recall the share of actual positives found..."
            }
        ],
        "Behavioral": [
            {
                "question": "Tell me about a time you explained a complex finding to non-technical stakeholders.",
                "type": "behavioral",
                "difficulty": "medium",
                "time_limit": 240,
                "sample_answer": "Frame the business question, show the key result visually, state the decision it supports..."
            }
        ]
    }
}


def get_fallback_questions(role: str, category: str, count: int) -> List[QuestionSpec]:
    """Return up to ``count`` fallback questions for the role and category, or [] if none exist."""
    entries = FALLBACK_QUESTIONS.get(role, {}).get(category, [])
    return [QuestionSpec.model_validate(entry) for entry in entries[:max(count, 0)]]
