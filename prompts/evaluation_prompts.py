from typing import Dict, List

STAGE_CONFIGS: Dict[str, Dict[str, str]] = {
    "hr": {
        "stage_name": "HR round - career fit and potential",
        "criteria": (
            "- Genuine motivation: real understanding of the AI PM role, driven by interest rather than hype\n"
            "- Self-awareness: clear view of strengths, gaps and growth path\n"
            "- Collaboration: communicates and resolves conflict inside cross-functional teams"
        ),
        "guidance": (
            "- Strong opener: \"I have X years in Y kind of AI products and I'm best at Z.\"\n"
            "- Quantify: \"On my last project I used <method> and moved <metric> by N%.\"\n"
            "- Ask back: \"What is the hardest challenge for this role right now?\""
        ),
    },
    "professional": {
        "stage_name": "Professional round - hard skills in practice",
        "criteria": (
            "- Technical depth: explains how the AI works and ties it to a product scenario\n"
            "- Delivery: designs a feasible AI product, including the data flywheel\n"
            "- Commercial balance: weighs model quality against cost, revenue and user value"
        ),
        "guidance": (
            "- Lead with the conclusion: \"I'd recommend X, for three reasons...\"\n"
            "- Land the tech: \"I'd pick approach X because it balances quality and cost.\"\n"
            "- Back it with data: \"In my experience this usually lifts <metric> by N%.\""
        ),
    },
    "final": {
        "stage_name": "Final round - strategy and industry insight",
        "criteria": (
            "- Industry insight: forward-looking view on trends such as agents and multimodal models\n"
            "- Strategy: thinks at the portfolio level and designs a workable business model\n"
            "- Structuring: breaks an open-ended problem into an analysable plan"
        ),
        "guidance": (
            "- Strategic opener: \"Looking at where the industry is going, the core of this is...\"\n"
            "- Show range: \"I'll look at user value, technical feasibility and the business model.\"\n"
            "- Show commitment: \"I've studied your company's ... in depth.\""
        ),
    },
}

def get_stage_config(stage: str) -> Dict[str, str]:
    return STAGE_CONFIGS.get((stage or "").lower(), STAGE_CONFIGS["professional"])

ANSWER_SYSTEM_PROMPT = (
    "You are a top AI product manager interview coach. Follow the playbook and the JSON format "
    "the user gives you exactly. Judge validity against the playbook first. "
    "Return one clean JSON object that a program can parse directly."
)

SET_SYSTEM_PROMPT = (
    "You are a friendly but direct AI product manager interviewer. Return the evaluation strictly "
    "in the requested JSON format with fully valid syntax. Explain the basis for each judgement "
    "and keep suggestions concrete."
)

def get_answer_evaluation_prompt(
    question: str,
    user_answer: str,
    stage: str,
    question_analysis: str,
    answer_framework: str,
) -> str:
    cfg = get_stage_config(stage)
    prompt = f"""
# Role: AI interview coach

## Playbook (your evaluation baseline)
- Interview question: {question}
- What the question tests: {question_analysis}
- Outline of a high-scoring answer: {answer_framework}

## Under evaluation
- Stage: {cfg['stage_name']}
- Candidate answer: {user_answer}

## Stage criteria
{cfg['criteria']}

## High-scoring templates for this stage
{cfg['guidance']}

## Workflow
1. Validity check. Random characters or a bare name are invalid. Otherwise compare the answer with the
   playbook; only an answer with zero conceptual overlap is invalid. A short but on-topic answer is valid
   and should be called out as thin. If invalid, stop and fill the JSON with the invalid-answer values.
2. Compare the answer with the playbook in detail.
3. Pick the strongest points, the biggest gaps (with scenario-based fixes) and one probing follow-up.
4. Fill the JSON below.

## Output format (strict)
{{
  "preliminaryAnalysis": {{
    "isValid": <true or false>,
    "reasoning": "<why the answer is or is not valid>"
  }},
  "performanceLevel": "<'Cannot evaluate' if invalid; otherwise one of 'Assistant', 'Writer', 'Producer', 'Director'>",
  "summary": "<one vivid, professional sentence comparing the answer with the playbook>",
  "strengths": [
    {{"competency": "<area>", "description": "<quote the answer and tie it to the playbook>"}}
  ],
  "improvements": [
    {{"competency": "<area>", "suggestion": "<the gap and how to close it>", "example": "<a ready-to-use phrasing>"}}
  ],
  "followUpQuestion": "<encourage a retry if invalid; otherwise a probing follow-up>",
  "expertGuidance": {{
    "questionAnalysis": "<repeat what the question tests>",
    "answerFramework": "<repeat the high-scoring outline>"
  }}
}}
"""
    return prompt

def _format_set_qa(questions: List[str], answers: List[str]) -> str:
    blocks = []
    for i, q in enumerate(questions, start=1):
        a = answers[i - 1] if i - 1 < len(answers) and answers[i - 1] else "Not answered"
        blocks.append(f"Question {i}: {q}\nAnswer {i}: {a}")
    return "\n\n".join(blocks)

def get_question_set_prompt(
    stage: str,
    questions: List[str],
    answers: List[str],
    stage_title: str,
    set_index: int,
) -> str:
    cfg = get_stage_config(stage)
    prompt = f"""
Evaluate this mock interview question set as an AI product manager interviewer. Be friendly, a little
playful, and direct. Every suggestion must be concrete and actionable.

## Set
Title: {stage_title}
Stage: {cfg['stage_name']}
Set number: {set_index}
Question count: {len(questions)}

## Questions and answers
{_format_set_qa(questions, answers)}

## Stage criteria
{cfg['criteria']}

## Return strictly this JSON
{{
  "performanceLevel": "<one of 'Director level', 'Producer level', 'Writer level', 'Assistant level'>",
  "summary": "<2-3 sentences with a vivid metaphor>",
  "strengths": [{{"area": "<area>", "description": "<what went well, quoting the answers>"}}],
  "improvements": [{{"area": "<area>", "suggestion": "<direct fix>", "example": "<better phrasing with numbers>"}}],
  "nextSteps": [{{"focus": "<focus area>", "actionable": "<step with a deadline and a measurable goal>"}}],
  "encouragement": "<closing line>"
}}

Make sure the JSON is valid: every string in double quotes, no trailing commas.
"""
    return prompt
