"""Static course catalog: overview, weekly syllabus, modules, and resources."""

import copy
from typing import Any, Dict, List, Optional

from fastapi import HTTPException


COURSE_TITLE = "AI in Education"
COURSE_DESCRIPTION = (
    "This course explores the intersection of artificial intelligence and education, "
    "covering theoretical foundations, practical applications, and ethical considerations. "
    "Students will gain hands-on experience with AI tools and techniques used in educational settings."
)

COURSE_STATS = [
    {"number": "12", "label": "Weeks"},
    {"number": "8", "label": "Modules"},
    {"number": "4", "label": "Projects"},
    {"number": "24", "label": "Lectures"},
]

LEARNING_OUTCOMES = [
    {
        "id": 1,
        "title": "Understanding AI Fundamentals",
        "description": "Master core AI concepts including machine learning, neural networks, and natural language processing.",
    },
    {
        "id": 2,
        "title": "Educational Applications",
        "description": "Explore AI-powered learning platforms, adaptive learning systems, and intelligent tutoring systems.",
    },
    {
        "id": 3,
        "title": "Assessment & Analytics",
        "description": "Learn about automated grading, learning analytics, and performance prediction models.",
    },
    {
        "id": 4,
        "title": "Ethical Considerations",
        "description": "Address bias, privacy, and fairness in AI educational systems.",
    },
    {
        "id": 5,
        "title": "Implementation Strategies",
        "description": "Design and deploy AI solutions in educational environments effectively.",
    },
    {
        "id": 6,
        "title": "Future Trends",
        "description": "Anticipate emerging technologies and their potential impact on education.",
    },
]

# (title, topics, deliverables, duration) per week, in order.
_WEEKS = [
    (
        "Introduction to AI in Education",
        ["Overview of artificial intelligence", "Historical context of AI in education",
         "Current applications and trends", "Benefits and challenges"],
        ["Reading assignment", "Discussion post"],
        "3 hours",
    ),
    (
        "Machine Learning Fundamentals I",
        ["Types of machine learning", "Supervised vs unsupervised learning",
         "Linear regression and classification", "Model evaluation metrics"],
        ["Lab exercise", "Quiz 1"],
        "4 hours",
    ),
    (
        "Machine Learning Fundamentals II",
        ["Neural networks basics", "Deep learning concepts",
         "Training and validation", "Overfitting and regularization"],
        ["ML project", "Technical report"],
        "4 hours",
    ),
    (
        "Natural Language Processing in Education",
        ["Text analysis and processing", "Sentiment analysis for student feedback",
         "Automated essay scoring", "Language learning applications"],
        ["NLP project", "Case study analysis"],
        "5 hours",
    ),
    (
        "Computer Vision for Educational Content",
        ["Image recognition and classification", "Document analysis and OCR",
         "Visual learning materials", "Accessibility applications"],
        ["Vision project", "Accessibility assessment"],
        "4 hours",
    ),
    (
        "Personalized Learning Systems",
        ["Adaptive learning algorithms", "Student modeling",
         "Recommendation systems", "Learning path optimization"],
        ["Design proposal", "Prototype demo"],
        "4 hours",
    ),
    (
        "Intelligent Tutoring Systems",
        ["ITS architecture and components", "Knowledge representation",
         "Student assessment methods", "Feedback generation"],
        ["ITS evaluation", "Research paper"],
        "4 hours",
    ),
    (
        "Learning Analytics & Data Mining",
        ["Educational data mining techniques", "Learning analytics frameworks",
         "Predictive modeling", "Dashboard design and visualization"],
        ["Analytics dashboard", "Data analysis report"],
        "5 hours",
    ),
    (
        "Assessment and Evaluation",
        ["Automated assessment systems", "Computer-based testing",
         "Performance prediction", "Bias detection and mitigation"],
        ["Assessment tool", "Bias analysis"],
        "4 hours",
    ),
    (
        "Ethical AI in Education",
        ["Privacy and data protection", "Algorithmic bias and fairness",
         "Transparency and explainability", "Ethical frameworks and guidelines"],
        ["Ethics case study", "Policy recommendation"],
        "3 hours",
    ),
    (
        "Implementation and Integration",
        ["System architecture design", "Technology stack selection",
         "Integration with existing platforms", "Scalability considerations"],
        ["Technical specification", "Implementation plan"],
        "4 hours",
    ),
    (
        "AI-Powered Learning Platforms",
        ["Modern LMS integration", "Chatbots and virtual assistants",
         "Gamification with AI", "Mobile learning applications"],
        ["Platform prototype", "User experience study"],
        "4 hours",
    ),
    (
        "Future Trends and Emerging Technologies",
        ["Virtual and augmented reality in education", "Conversational AI and chatbots",
         "Blockchain for education credentials", "Research opportunities and challenges"],
        ["Technology roadmap", "Innovation proposal"],
        "4 hours",
    ),
    (
        "Capstone Project Presentations",
        ["Final project presentations", "Peer evaluations",
         "Industry case studies", "Course reflection and synthesis"],
        ["Final project", "Peer reviews", "Portfolio"],
        "4 hours",
    ),
    (
        "Final Exam and Course Wrap-up",
        ["Comprehensive final examination", "Course evaluation and feedback",
         "Professional development planning", "Certification and next steps"],
        ["Final exam", "Course evaluation", "Development plan"],
        "3 hours",
    ),
]

SYLLABUS_WEEKS = [
    {"week": index, "title": title, "topics": topics, "deliverables": deliverables, "duration": duration}
    for index, (title, topics, deliverables, duration) in enumerate(_WEEKS, start=1)
]

GRADING_BREAKDOWN = [
    {"component": "Assignments", "percentage": 25, "description": "Weekly assignments and lab exercises"},
    {"component": "Quizzes", "percentage": 15, "description": "Short assessments on key concepts"},
    {"component": "Projects", "percentage": 20, "description": "Hands-on implementation projects"},
    {"component": "Final Project", "percentage": 20, "description": "Comprehensive capstone project"},
    {"component": "Final Exam", "percentage": 15, "description": "Comprehensive final examination"},
    {"component": "Participation", "percentage": 5, "description": "Discussion posts and class engagement"},
]

MODULE_STATUSES = ("available", "coming-soon")

COURSE_MODULES = [
    {"id": 1, "title": "Introduction to AI in Education", "duration": "2 weeks",
     "topics": ["AI fundamentals", "Educational context", "Historical overview"], "status": "available"},
    {"id": 2, "title": "Machine Learning for Educators", "duration": "2 weeks",
     "topics": ["Supervised learning", "Unsupervised learning", "Deep learning basics"], "status": "available"},
    {"id": 3, "title": "Natural Language Processing", "duration": "1.5 weeks",
     "topics": ["Text analysis", "Language models", "Educational applications"], "status": "coming-soon"},
    {"id": 4, "title": "Personalized Learning Systems", "duration": "1.5 weeks",
     "topics": ["Adaptive algorithms", "Student modeling", "Content recommendation"], "status": "coming-soon"},
    {"id": 5, "title": "Automated Assessment", "duration": "2 weeks",
     "topics": ["Grading systems", "Plagiarism detection", "Performance analytics"], "status": "coming-soon"},
    {"id": 6, "title": "Intelligent Tutoring Systems", "duration": "1.5 weeks",
     "topics": ["Conversational AI", "Tutoring strategies", "Feedback mechanisms"], "status": "coming-soon"},
    {"id": 7, "title": "Ethics and AI in Education", "duration": "1 week",
     "topics": ["Bias detection", "Privacy concerns", "Fairness in AI"], "status": "coming-soon"},
    {"id": 8, "title": "Future of Educational Technology", "duration": "1.5 weeks",
     "topics": ["Emerging trends", "Implementation strategies", "Case studies"], "status": "coming-soon"},
]

RESOURCE_CATEGORIES = [
    {
        "title": "Research Papers",
        "description": "Curated collection of academic papers on AI in education",
        "resources": [
            {"title": "Artificial Intelligence in Education: A Review", "type": "Academic Paper",
             "author": "Baker & Smith (2024)", "link": None},
            {"title": "Machine Learning Applications in Educational Assessment", "type": "Research Study",
             "author": "Johnson et al. (2023)", "link": None},
            {"title": "Ethical Considerations in Educational AI Systems", "type": "Position Paper",
             "author": "Chen & Williams (2024)", "link": None},
        ],
    },
    {
        "title": "Tools & Platforms",
        "description": "Software tools and platforms for implementing AI in education",
        "resources": [
            {"title": "TensorFlow for Educators", "type": "Framework",
             "author": "Google", "link": "https://www.tensorflow.org/resources/learn-ml"},
            {"title": "Hugging Face Transformers", "type": "Library",
             "author": "Hugging Face", "link": "https://huggingface.co/docs/transformers"},
            {"title": "OpenAI GPT API for Education", "type": "API Service",
             "author": "OpenAI", "link": "https://platform.openai.com/docs"},
        ],
    },
    {
        "title": "Datasets",
        "description": "Educational datasets for AI research and development",
        "resources": [
            {"title": "Student Performance Dataset", "type": "Dataset", "author": "UCI ML Repository",
             "link": "https://archive.ics.uci.edu/ml/datasets/student+performance"},
            {"title": "Educational Text Corpus", "type": "Text Dataset", "author": "Stanford NLP", "link": None},
            {"title": "Learning Analytics Dataset", "type": "Behavioral Data",
             "author": "EdTech Research Lab", "link": None},
        ],
    },
    {
        "title": "Case Studies",
        "description": "Real-world implementations of AI in educational settings",
        "resources": [
            {"title": "AI-Powered Tutoring at MIT", "type": "Case Study",
             "author": "MIT Education Lab", "link": None},
            {"title": "Personalized Learning with Adaptive Algorithms", "type": "Implementation Guide",
             "author": "Carnegie Learning", "link": None},
            {"title": "Automated Essay Scoring Systems", "type": "Technical Report",
             "author": "Educational Testing Service", "link": None},
        ],
    },
]


def get_course_overview() -> Dict[str, Any]:
    return {
        "title": COURSE_TITLE,
        "description": COURSE_DESCRIPTION,
        "stats": copy.deepcopy(COURSE_STATS),
        "learning_outcomes": copy.deepcopy(LEARNING_OUTCOMES),
    }


def get_syllabus() -> Dict[str, Any]:
    return {
        "title": COURSE_TITLE,
        "description": COURSE_DESCRIPTION,
        "weeks": copy.deepcopy(SYLLABUS_WEEKS),
        "grading": copy.deepcopy(GRADING_BREAKDOWN),
    }


def get_modules(status: Optional[str] = None) -> List[Dict[str, Any]]:
    if status is not None and status not in MODULE_STATUSES:
        raise HTTPException(status_code=400, detail=f"status must be one of: {', '.join(MODULE_STATUSES)}")
    return [copy.deepcopy(module) for module in COURSE_MODULES if status is None or module["status"] == status]


def get_resources() -> List[Dict[str, Any]]:
    categories = copy.deepcopy(RESOURCE_CATEGORIES)
    for category in categories:
        for resource in category["resources"]:
            resource["available"] = resource["link"] is not None
    return categories
