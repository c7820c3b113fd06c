"""
Document Evaluation Agent

Reads one bidder's submission for a single tender category and scores it
against the category's purpose.
"""

from crewai import Agent, Task

from agents.base import get_default_llm, AGENT_VERBOSE, validate_json_output


EVALUATION_SYSTEM_PROMPT = """You are a senior tender evaluator for construction
projects. You score bidder submissions one category at a time and justify every
score with evidence from the documents.

IMPORTANT: You must output ONLY valid JSON. No explanatory text before or after the JSON."""


def create_document_evaluation_agent() -> Agent:
    """Create the Document Evaluation Agent."""
    return Agent(
        role="Tender Evaluation Specialist",
        goal="Score bidder submissions per category, fairly and with evidence",
        backstory="""You have sat on evaluation panels for commercial, residential and
hospitality developments for twenty years. You read technical, commercial and legal
submissions closely, you never reward volume over substance, and you call out gaps
and risks a client would regret missing.""",
        llm=get_default_llm(),
        verbose=AGENT_VERBOSE,
        allow_delegation=False
    )


def create_document_evaluation_task(
    agent: Agent,
    category_name: str,
    category_description: str,
    documents: list[dict]
) -> Task:
    """
    Create the scoring task for one bidder and one category.

    Args:
        agent: The Document Evaluation Agent
        category_name: Category being scored, e.g. "Technical"
        category_description: What the category is meant to demonstrate
        documents: ``{"name": ..., "text": ...}`` for each submitted file
    """
    submission = "\n\n".join(
        f"--- DOCUMENT: {doc['name']} ---\n{doc['text'] or '(no extractable text)'}"
        for doc in documents
    )

    return Task(
        description=f"""{EVALUATION_SYSTEM_PROMPT}

CATEGORY: {category_name}
CATEGORY GUIDANCE: {category_description or 'None provided'}

BIDDER SUBMISSION:
{submission}

Create a JSON response with the following structure:
{{
    "score": number between 0 and 100,
    "summary": "Two or three sentences on how well the submission covers the category",
    "strengths": ["Specific strength backed by the documents"],
    "weaknesses": ["Specific gap or weakness"],
    "risks": ["Delivery, compliance or commercial risk to the client"]
}}

Scoring Guidelines:
- 80-100: Complete, specific and well evidenced
- 70-79: Solid with minor gaps
- 60-69: Adequate but generic or partly missing
- Below 60: Major omissions or non-compliant""",
        expected_output="A valid JSON object with score, summary, strengths, weaknesses and risks",
        agent=agent
    )


def evaluate_submission(
    category_name: str,
    category_description: str,
    documents: list[dict]
) -> dict:
    """
    Score one bidder's documents for one category.

    Returns:
        Parsed evaluation dict

    Raises:
        ValueError: If the agent output is not the expected JSON
    """
    agent = create_document_evaluation_agent()
    task = create_document_evaluation_task(agent, category_name, category_description, documents)

    result = agent.execute_task(task)

    required_keys = ["score", "summary", "strengths", "weaknesses", "risks"]
    return validate_json_output(result, required_keys)
