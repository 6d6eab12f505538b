"""Static per-role interview preparation templates.

Read-only reference data keyed by role type and round type. Each role carries
one or two technical rounds plus the shared HR round. ``STUDY_TRACKS`` lists,
per role, the ordered (focus, topics) days the sprint generator walks through,
highest-priority topics first.
"""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

ROLE_TYPES: Tuple[str, ...] = (
    "SDE",
    "SDET",
    "ML",
    "DevOps",
    "Frontend",
    "Backend",
    "FullStack",
    "Data",
    "PM",
    "MobileEngineer",
)

FOCUS_AREAS: Tuple[str, ...] = ("DSA", "SystemDesign", "Behavioral", "Review", "Mock")
PRIORITY_TIERS: Tuple[str, ...] = ("high", "medium", "low")


def _topic(name: str, subtopics: List[str], priority: str) -> Dict[str, Any]:
    return {"name": name, "subtopics": subtopics, "priority": priority}


HR_ROUND_TEMPLATE: Dict[str, Any] = {
    "round": "HR",
    "display_name": "HR / Behavioral Round",
    "focus_areas": ["STAR Method", "Company Research", "Cultural Fit"],
    "key_topics": [
        _topic(
            "STAR Method",
            [
                "Situation: Set the context",
                "Task: Describe your responsibility",
                "Action: Explain what you did",
                "Result: Share the outcome with metrics",
            ],
            "high",
        ),
        _topic(
            "Common Behavioral Themes",
            [
                "Leadership & Initiative",
                "Conflict Resolution",
                "Teamwork & Collaboration",
                "Handling Failure",
                "Time Management & Prioritization",
            ],
            "high",
        ),
        _topic(
            "Company Research",
            ["Company mission & values", "Recent news & achievements", "Products & services", "Company culture"],
            "medium",
        ),
    ],
    "common_questions": [
        "Tell me about yourself",
        "Why do you want to work here?",
        "Tell me about a challenging project you worked on",
        "Describe a time you had a conflict with a teammate",
        "What is your biggest strength/weakness?",
        "Where do you see yourself in 5 years?",
        "Why are you leaving your current job?",
        "Tell me about a time you failed and what you learned",
    ],
    "time_allocation": "30-45 min prep, practice with a friend",
    "tips": [
        "Prepare 5-6 STAR stories that can be adapted to different questions",
        "Research the company thoroughly - know their products, values, recent news",
        "Practice answering out loud, not just in your head",
        "Have 2-3 thoughtful questions ready for the interviewer",
        "Be genuine - authenticity matters more than perfect answers",
    ],
}


PREP_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "SDE": {
        "display_name": "Software Development Engineer",
        "description": "General software engineering role focusing on DSA and system design",
        "rounds": [
            {
                "round": "TechnicalRound1",
                "display_name": "Technical Round 1 (DSA/Coding)",
                "focus_areas": ["Data Structures", "Algorithms", "Problem Solving", "Code Quality"],
                "key_topics": [
                    _topic("Arrays & Strings", ["Two Pointers", "Sliding Window", "Prefix Sum", "String Manipulation"], "high"),
                    _topic("Trees & Graphs", ["BFS/DFS Traversal", "Binary Search Trees", "Graph Algorithms", "Tree Problems"], "high"),
                    _topic("Dynamic Programming", ["1D DP", "2D DP", "Memoization", "Tabulation"], "high"),
                    _topic("Hash Maps & Sets", ["Frequency Counting", "Two Sum Pattern", "Caching"], "medium"),
                ],
                "common_questions": [
                    "Two Sum, Three Sum variations",
                    "Merge Intervals",
                    "LRU Cache implementation",
                    "Binary Tree Level Order Traversal",
                    "Longest Substring Without Repeating Characters",
                    "Valid Parentheses",
                    "Course Schedule (Topological Sort)",
                ],
                "time_allocation": "2-3 hours daily, 45-60 min per problem",
                "tips": [
                    "Always clarify requirements before coding",
                    "Think out loud - explain your approach",
                    "Start with brute force, then optimize",
                    "Test with edge cases (empty, single element, large input)",
                    "Practice writing clean, readable code",
                ],
            },
            {
                "round": "SystemDesign",
                "display_name": "System Design Round",
                "focus_areas": ["Scalability", "Distributed Systems", "Database Design", "Trade-offs"],
                "key_topics": [
                    _topic("Fundamentals", ["Load Balancing", "Caching (Redis, CDN)", "Database Sharding", "CAP Theorem"], "high"),
                    _topic("Common Systems", ["URL Shortener", "Rate Limiter", "Chat System", "News Feed"], "high"),
                    _topic("Data Storage", ["SQL vs NoSQL", "Indexing", "Replication", "Partitioning"], "medium"),
                ],
                "common_questions": [
                    "Design a URL shortener",
                    "Design Twitter/Instagram feed",
                    "Design a rate limiter",
                    "Design a notification system",
                    "Design a file storage system like Dropbox",
                ],
                "time_allocation": "1-2 hours daily on one system design problem",
                "tips": [
                    "Start with requirements and constraints",
                    "Draw diagrams and components",
                    "Discuss trade-offs for every decision",
                    "Estimate scale: QPS, storage, bandwidth",
                    "Think about failure scenarios",
                ],
            },
            HR_ROUND_TEMPLATE,
        ],
    },
    "SDET": {
        "display_name": "Software Development Engineer in Test",
        "description": "Testing and automation focused role with coding skills",
        "rounds": [
            {
                "round": "TechnicalRound1",
                "display_name": "Technical Round 1 (Testing + Coding)",
                "focus_areas": ["Test Strategy", "Automation", "Bug Analysis", "Coding"],
                "key_topics": [
                    _topic("Test Case Design", ["Boundary Value Analysis", "Equivalence Partitioning", "Decision Tables", "Edge Cases"], "high"),
                    _topic("Automation Frameworks", ["Selenium WebDriver", "TestNG/JUnit", "Page Object Model", "API Testing (RestAssured)"], "high"),
                    _topic("Testing Types", ["Unit Testing", "Integration Testing", "E2E Testing", "Performance Testing"], "high"),
                    _topic("DSA Basics", ["Arrays", "Strings", "Basic Algorithms", "Time Complexity"], "medium"),
                ],
                "common_questions": [
                    "How would you test a login page?",
                    "Write test cases for an elevator system",
                    "Explain your automation framework architecture",
                    "How do you handle flaky tests?",
                    "Write a function to validate email addresses",
                    "How would you test an API endpoint?",
                    "Explain CI/CD integration for tests",
                ],
                "time_allocation": "2 hours daily, split between testing concepts and coding",
                "tips": [
                    "Think about edge cases and negative scenarios",
                    "Know your automation framework inside out",
                    "Practice writing clean, maintainable test code",
                    "Understand the testing pyramid",
                    "Be ready to discuss test strategy for any feature",
                ],
            },
            HR_ROUND_TEMPLATE,
        ],
    },
    "ML": {
        "display_name": "Machine Learning Engineer",
        "description": "ML/AI focused role combining software engineering with machine learning",
        "rounds": [
            {
                "round": "TechnicalRound1",
                "display_name": "Technical Round 1 (ML Fundamentals + Coding)",
                "focus_areas": ["ML Algorithms", "Math/Statistics", "Coding", "Model Evaluation"],
                "key_topics": [
                    _topic("ML Algorithms", ["Linear/Logistic Regression", "Decision Trees/Random Forests", "Neural Networks", "SVMs"], "high"),
                    _topic("Deep Learning", ["CNNs", "RNNs/LSTMs", "Transformers", "Attention Mechanism"], "high"),
                    _topic("Statistics & Math", ["Probability", "Bayes Theorem", "Linear Algebra", "Gradient Descent"], "high"),
                    _topic("ML Engineering", ["Feature Engineering", "Model Training", "Hyperparameter Tuning", "MLOps basics"], "medium"),
                ],
                "common_questions": [
                    "Explain bias-variance tradeoff",
                    "How would you handle imbalanced datasets?",
                    "Explain backpropagation",
                    "What evaluation metrics would you use for classification?",
                    "How would you deploy an ML model?",
                    "Explain overfitting and how to prevent it",
                    "Code a simple neural network from scratch",
                ],
                "time_allocation": "3 hours daily, split between ML theory and coding",
                "tips": [
                    "Know the math behind common algorithms",
                    "Be ready to code ML algorithms from scratch",
                    "Practice explaining complex concepts simply",
                    "Have projects ready to discuss in detail",
                    "Understand end-to-end ML pipeline",
                ],
            },
            HR_ROUND_TEMPLATE,
        ],
    },
    "DevOps": {
        "display_name": "DevOps Engineer",
        "description": "Infrastructure, CI/CD, and cloud operations focused role",
        "rounds": [
            {
                "round": "TechnicalRound1",
                "display_name": "Technical Round 1 (DevOps + Scripting)",
                "focus_areas": ["CI/CD", "Cloud Platforms", "Containers", "Infrastructure as Code"],
                "key_topics": [
                    _topic("CI/CD", ["Jenkins/GitHub Actions", "Pipeline Design", "Deployment Strategies", "Artifact Management"], "high"),
                    _topic("Containers & Orchestration", ["Docker", "Kubernetes", "Container Networking", "Helm Charts"], "high"),
                    _topic("Cloud Platforms", ["AWS/GCP/Azure basics", "IAM", "VPC & Networking", "Serverless"], "high"),
                    _topic("IaC & Automation", ["Terraform", "Ansible", "Shell Scripting", "Python Automation"], "medium"),
                ],
                "common_questions": [
                    "Design a CI/CD pipeline for a microservices app",
                    "How would you handle a production incident?",
                    "Explain Kubernetes architecture",
                    "How do you ensure infrastructure security?",
                    "Write a script to automate deployment",
                    "Explain blue-green vs canary deployments",
                    "How do you monitor and alert on system health?",
                ],
                "time_allocation": "2-3 hours daily on hands-on practice",
                "tips": [
                    "Have hands-on experience with your tools",
                    "Know troubleshooting commands by heart",
                    "Understand networking fundamentals",
                    "Be ready to whiteboard architecture",
                    "Practice scripting (Bash, Python)",
                ],
            },
            HR_ROUND_TEMPLATE,
        ],
    },
    "Frontend": {
        "display_name": "Frontend Engineer",
        "description": "UI/UX focused web development role",
        "rounds": [
            {
                "round": "TechnicalRound1",
                "display_name": "Technical Round 1 (Frontend + JavaScript)",
                "focus_areas": ["JavaScript", "React/Vue/Angular", "CSS", "Web Performance"],
                "key_topics": [
                    _topic("JavaScript Fundamentals", ["Closures", "Promises/Async-Await", "Event Loop", "Prototypes"], "high"),
                    _topic("React/Framework", ["Component Lifecycle", "State Management", "Hooks", "Virtual DOM"], "high"),
                    _topic("CSS & Layout", ["Flexbox/Grid", "Responsive Design", "CSS-in-JS", "Animations"], "high"),
                    _topic("Web Performance", ["Lazy Loading", "Bundle Optimization", "Core Web Vitals", "Caching"], "medium"),
                ],
                "common_questions": [
                    "Explain the event loop in JavaScript",
                    "Build a debounce/throttle function",
                    "How does React reconciliation work?",
                    "Implement infinite scroll component",
                    "Explain CSS specificity",
                    "How would you optimize a slow webpage?",
                    "Build a modal component from scratch",
                ],
                "time_allocation": "2-3 hours daily, mix of theory and coding",
                "tips": [
                    "Know JavaScript fundamentals deeply",
                    "Practice building components from scratch",
                    "Understand browser rendering pipeline",
                    "Be ready for live coding challenges",
                    "Have a portfolio of projects to discuss",
                ],
            },
            HR_ROUND_TEMPLATE,
        ],
    },
    "Backend": {
        "display_name": "Backend Engineer",
        "description": "Server-side development, APIs, and database focused role",
        "rounds": [
            {
                "round": "TechnicalRound1",
                "display_name": "Technical Round 1 (Backend + DSA)",
                "focus_areas": ["API Design", "Databases", "System Architecture", "DSA"],
                "key_topics": [
                    _topic("API Design", ["REST principles", "GraphQL", "Authentication/Authorization", "Rate Limiting"], "high"),
                    _topic("Databases", ["SQL Queries", "Indexing", "Transactions", "NoSQL patterns"], "high"),
                    _topic("DSA", ["Arrays/Strings", "Trees/Graphs", "Hash Maps", "Time Complexity"], "high"),
                    _topic("Architecture", ["Microservices", "Message Queues", "Caching", "Load Balancing"], "medium"),
                ],
                "common_questions": [
                    "Design a REST API for a social media app",
                    "How would you optimize a slow database query?",
                    "Explain SQL vs NoSQL trade-offs",
                    "Implement LRU Cache",
                    "How do you handle concurrent requests?",
                    "Design a notification service",
                    "Explain database transactions and ACID",
                ],
                "time_allocation": "2-3 hours daily, DSA + system design",
                "tips": [
                    "Know SQL deeply - joins, indexes, explain plans",
                    "Understand concurrency and thread safety",
                    "Practice API design exercises",
                    "Be ready to discuss scaling strategies",
                    "Know your language runtime well (JVM, Node, etc.)",
                ],
            },
            HR_ROUND_TEMPLATE,
        ],
    },
    "FullStack": {
        "display_name": "Full Stack Engineer",
        "description": "End-to-end development covering frontend and backend",
        "rounds": [
            {
                "round": "TechnicalRound1",
                "display_name": "Technical Round 1 (Full Stack Coding)",
                "focus_areas": ["JavaScript/TypeScript", "React + Node", "Databases", "API Integration"],
                "key_topics": [
                    _topic("Frontend", ["React Hooks", "State Management", "Component Design", "CSS Frameworks"], "high"),
                    _topic("Backend", ["Node.js/Express", "REST APIs", "Authentication", "ORMs"], "high"),
                    _topic("Databases", ["SQL Basics", "MongoDB", "Data Modeling", "Migrations"], "high"),
                    _topic("DSA Basics", ["Arrays", "Strings", "Objects/Maps", "Basic Algorithms"], "medium"),
                ],
                "common_questions": [
                    "Build a todo app with CRUD operations",
                    "Explain the request-response cycle",
                    "How would you handle authentication?",
                    "Optimize a slow React component",
                    "Design a database schema for an e-commerce app",
                    "Explain how you would deploy this app",
                    "Build a real-time chat feature",
                ],
                "time_allocation": "2-3 hours daily, alternating frontend and backend",
                "tips": [
                    "Have a full-stack project to walk through",
                    "Know both sides reasonably well",
                    "Understand how frontend and backend communicate",
                    "Be ready to debug across the stack",
                    "Practice building features end-to-end",
                ],
            },
            HR_ROUND_TEMPLATE,
        ],
    },
    "Data": {
        "display_name": "Data Engineer",
        "description": "Data pipelines, ETL, and big data infrastructure focused role",
        "rounds": [
            {
                "round": "TechnicalRound1",
                "display_name": "Technical Round 1 (Data Engineering)",
                "focus_areas": ["SQL", "Data Pipelines", "Big Data", "Python/Scala"],
                "key_topics": [
                    _topic("SQL", ["Complex Queries", "Window Functions", "CTEs", "Query Optimization"], "high"),
                    _topic("Data Pipelines", ["ETL/ELT", "Apache Airflow", "Data Modeling", "Data Quality"], "high"),
                    _topic("Big Data", ["Spark", "Kafka", "Hadoop basics", "Data Warehousing"], "high"),
                    _topic("Programming", ["Python/PySpark", "Scala basics", "SQL coding", "Scripting"], "medium"),
                ],
                "common_questions": [
                    "Write a SQL query with window functions",
                    "Design a data pipeline for event tracking",
                    "Explain star schema vs snowflake schema",
                    "How would you handle late-arriving data?",
                    "Optimize a slow Spark job",
                    "Design a real-time analytics pipeline",
                    "Explain data partitioning strategies",
                ],
                "time_allocation": "2-3 hours daily, heavy focus on SQL",
                "tips": [
                    "Master SQL - it's the core skill",
                    "Know at least one big data tool well",
                    "Understand data modeling principles",
                    "Be ready to whiteboard pipeline architectures",
                    "Practice optimizing queries and jobs",
                ],
            },
            HR_ROUND_TEMPLATE,
        ],
    },
    "PM": {
        "display_name": "Product Manager",
        "description": "Product strategy, user experience, and cross-functional leadership role",
        "rounds": [
            {
                "round": "TechnicalRound1",
                "display_name": "Product Round (Product Sense)",
                "focus_areas": ["Product Thinking", "Metrics", "User Research", "Prioritization"],
                "key_topics": [
                    _topic("Product Sense", ["User Problems", "Solution Design", "Trade-offs", "MVP Definition"], "high"),
                    _topic("Metrics", ["North Star Metric", "KPIs", "Funnel Analysis", "A/B Testing"], "high"),
                    _topic("Strategy", ["Market Analysis", "Competitive Landscape", "Go-to-Market", "Roadmapping"], "high"),
                    _topic("Execution", ["PRDs", "Stakeholder Management", "Sprint Planning", "Launch Planning"], "medium"),
                ],
                "common_questions": [
                    "Design a product for [specific user group]",
                    "How would you improve [existing product]?",
                    "What metrics would you track for [feature]?",
                    "How would you prioritize these features?",
                    "Tell me about a product you launched",
                    "How do you handle disagreements with engineering?",
                    "Design an MVP for [problem statement]",
                ],
                "time_allocation": "2 hours daily, practice case studies",
                "tips": [
                    "Use frameworks but don't be robotic",
                    "Always start with the user problem",
                    "Practice case studies out loud",
                    "Know your past products deeply",
                    "Be ready to discuss trade-offs",
                ],
            },
            HR_ROUND_TEMPLATE,
        ],
    },
    "MobileEngineer": {
        "display_name": "Mobile Engineer",
        "description": "iOS/Android or cross-platform mobile development role",
        "rounds": [
            {
                "round": "TechnicalRound1",
                "display_name": "Technical Round 1 (Mobile Development)",
                "focus_areas": ["Platform Knowledge", "UI/UX", "Performance", "DSA"],
                "key_topics": [
                    _topic(
                        "Platform Fundamentals",
                        ["iOS (Swift/UIKit/SwiftUI)", "Android (Kotlin/Jetpack)", "React Native/Flutter", "App Lifecycle"],
                        "high",
                    ),
                    _topic("Mobile UI", ["Layouts", "Navigation", "Animations", "Accessibility"], "high"),
                    _topic("Performance", ["Memory Management", "Network Optimization", "Battery Efficiency", "App Size"], "high"),
                    _topic("DSA", ["Arrays/Strings", "Trees", "Basic Algorithms", "Mobile-specific data structures"], "medium"),
                ],
                "common_questions": [
                    "Explain the activity/view lifecycle",
                    "How do you handle offline mode?",
                    "Build a list view with infinite scroll",
                    "How would you optimize app startup time?",
                    "Explain memory leaks and how to prevent them",
                    "Design a caching strategy for images",
                    "How do you handle push notifications?",
                ],
                "time_allocation": "2-3 hours daily, platform + DSA",
                "tips": [
                    "Know your platform deeply (iOS or Android)",
                    "Understand platform-specific patterns",
                    "Practice building UI components",
                    "Be ready to discuss published apps",
                    "Know the app store guidelines",
                ],
            },
            HR_ROUND_TEMPLATE,
        ],
    },
}


# Ordered study days per role; the final Review/Mock days are appended by the generator.
STUDY_TRACKS: Dict[str, List[Tuple[str, List[str]]]] = {
    "SDE": [
        ("DSA", ["Arrays", "Strings"]),
        ("DSA", ["Trees", "Graphs"]),
        ("DSA", ["Dynamic Programming"]),
        ("SystemDesign", ["Caching", "Databases"]),
        ("SystemDesign", ["Load Balancing", "APIs"]),
        ("SystemDesign", ["Scalability"]),
        ("Behavioral", ["STAR Stories", "Company Questions"]),
    ],
    "SDET": [
        ("DSA", ["Test Case Design", "Edge Cases"]),
        ("DSA", ["Bug Reporting", "Root Cause Analysis"]),
        ("SystemDesign", ["Test Automation Architecture"]),
        ("SystemDesign", ["Selenium", "API Testing", "CI/CD"]),
        ("SystemDesign", ["Performance", "Load Testing"]),
        ("Behavioral", ["STAR Stories", "Quality Mindset"]),
    ],
    "ML": [
        ("DSA", ["ML Algorithms"]),
        ("DSA", ["Deep Learning"]),
        ("DSA", ["Statistics & Math"]),
        ("SystemDesign", ["ML Engineering", "Model Deployment"]),
        ("SystemDesign", ["Feature Engineering", "MLOps basics"]),
        ("Behavioral", ["STAR Stories", "Project Deep Dive"]),
    ],
    "DevOps": [
        ("SystemDesign", ["CI/CD"]),
        ("SystemDesign", ["Containers & Orchestration"]),
        ("SystemDesign", ["Cloud Platforms"]),
        ("DSA", ["Shell Scripting", "Python Automation"]),
        ("SystemDesign", ["IaC & Automation", "Monitoring"]),
        ("Behavioral", ["STAR Stories", "Incident Response"]),
    ],
    "Frontend": [
        ("DSA", ["JavaScript Fundamentals"]),
        ("DSA", ["React/Framework"]),
        ("DSA", ["CSS & Layout"]),
        ("SystemDesign", ["Web Performance"]),
        ("SystemDesign", ["Frontend Architecture", "State Management"]),
        ("Behavioral", ["STAR Stories", "Portfolio Walkthrough"]),
    ],
    "Backend": [
        ("SystemDesign", ["API Design"]),
        ("SystemDesign", ["Databases"]),
        ("DSA", ["Arrays/Strings", "Hash Maps"]),
        ("DSA", ["Trees/Graphs"]),
        ("SystemDesign", ["Architecture", "Message Queues"]),
        ("Behavioral", ["STAR Stories", "Company Questions"]),
    ],
    "FullStack": [
        ("DSA", ["Frontend", "React Hooks"]),
        ("SystemDesign", ["Backend", "REST APIs"]),
        ("SystemDesign", ["Databases", "Data Modeling"]),
        ("DSA", ["DSA Basics"]),
        ("SystemDesign", ["Deployment", "Authentication"]),
        ("Behavioral", ["STAR Stories", "Project Walkthrough"]),
    ],
    "Data": [
        ("DSA", ["SQL Queries"]),
        ("DSA", ["Data Modeling"]),
        ("DSA", ["Statistics"]),
        ("SystemDesign", ["Data Pipelines"]),
        ("SystemDesign", ["ETL Processes"]),
        ("Behavioral", ["Case Studies"]),
    ],
    "PM": [
        ("Behavioral", ["Product Sense"]),
        ("Behavioral", ["Metrics & Analytics"]),
        ("SystemDesign", ["Product Design"]),
        ("SystemDesign", ["Technical Understanding"]),
        ("Behavioral", ["Leadership Stories"]),
        ("Behavioral", ["Stakeholder Management"]),
    ],
    "MobileEngineer": [
        ("DSA", ["Platform Fundamentals"]),
        ("DSA", ["Mobile UI"]),
        ("SystemDesign", ["Performance", "Memory Management"]),
        ("DSA", ["Arrays/Strings", "Trees"]),
        ("SystemDesign", ["Offline Mode", "Caching"]),
        ("Behavioral", ["STAR Stories", "Published Apps"]),
    ],
}

FOCUS_TASK_TEMPLATES: Dict[str, List[str]] = {
    "DSA": [
        "Solve 2 problems on {first_topic}",
        "Review pattern: {topics}",
        "Practice timed coding (30 min)",
        "Review solutions and optimize",
    ],
    "SystemDesign": [
        "Study concept: {topics}",
        "Design 1 small system",
        "Watch 1 system design video",
        "Document key trade-offs",
    ],
    "Behavioral": [
        "Prepare 2 STAR stories",
        "Practice common behavioral questions",
        "Review company values",
        "Mock behavioral interview (15 min)",
    ],
    "Review": [
        "Review weak topics",
        "Go through company question bank",
        "Complete 1 mock interview",
        "Final preparation notes",
    ],
    "Mock": [
        "Full mock interview (1 hour)",
        "Review feedback",
        "Practice weak areas",
        "Prepare questions for interviewer",
    ],
}


def get_prep_template(role_type: str) -> Dict[str, Any] | None:
    return PREP_TEMPLATES.get(role_type)


def get_round_prep_content(role_type: str, round_type: str) -> Dict[str, Any] | None:
    template = get_prep_template(role_type)
    if not template:
        return None
    for round_content in template["rounds"]:
        if round_content["round"] == round_type:
            return round_content
    return None


def available_rounds(role_type: str) -> List[Dict[str, str]]:
    template = get_prep_template(role_type)
    if not template:
        return []
    return [{"value": r["round"], "label": r["display_name"]} for r in template["rounds"]]


def topics_by_priority(role_type: str, round_type: str) -> List[Dict[str, Any]]:
    """Return a round's key topics ordered high -> medium -> low, stable within a tier."""
    content = get_round_prep_content(role_type, round_type)
    if not content:
        return []
    rank = {tier: index for index, tier in enumerate(PRIORITY_TIERS)}
    return sorted(content["key_topics"], key=lambda topic: rank.get(topic["priority"], len(rank)))


def practice_questions(role_type: str, focus: str) -> List[str]:
    """Pick the question pool matching a day's focus."""
    if focus == "Behavioral":
        return list(HR_ROUND_TEMPLATE["common_questions"])
    if focus == "SystemDesign":
        content = get_round_prep_content(role_type, "SystemDesign")
        if content:
            return list(content["common_questions"])
    content = get_round_prep_content(role_type, "TechnicalRound1")
    questions = list(content["common_questions"]) if content else []
    if focus in ("Review", "Mock"):
        questions.extend(HR_ROUND_TEMPLATE["common_questions"])
    return questions
