"""All prompt templates for Gemini API calls."""

_JSON_ONLY = "Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:"


def build_gap_analysis_prompt(current_role: str, target_role: str) -> str:
    return f"""You are a senior career coach and technical hiring manager.

Perform a skill gap analysis for a {current_role} aiming to become a {target_role}.

{_JSON_ONLY}
{{
  "critical_gaps": [
    {{
      "id": "<short identifier>",
      "name": "<skill name>",
      "priority": "<High|Medium|Low>",
      "current_level": "<typical level for a {current_role}>",
      "target_level": "<level expected of a {target_role}>",
      "description": "<one sentence on why this gap matters>"
    }}
  ],
  "proficiency_adjustments": [
    {{
      "skill": "<skill name>",
      "status": "<e.g. Exceeds (+10%)>",
      "percentage": <number 0-100>,
      "color": "<hex color code>"
    }}
  ],
  "emerging_skills": [<3 skills that will matter for a {target_role} in the next few years>]
}}

Return exactly 3 critical_gaps, ordered by priority (most important first), and 2 proficiency_adjustments."""


def build_roadmap_prompt(current_role: str, target_role: str) -> str:
    return f"""You are a senior career coach designing a learning plan.

Create a comprehensive 4-phase learning roadmap to go from {current_role} to {target_role}.

PHASES (use these statuses):
1. Foundation (Completed)
2. Core Tech (In Progress)
3. Advanced Concepts (Locked)
4. Capstone & Mastery (Locked)

RESOURCE RULES:
- For EACH item provide 2-3 specific, real-world learning resources.
- Prefer direct links to high-quality YouTube tutorials, articles or official documentation.
- If you cannot find a specific URL, use a highly specific search URL
  (e.g. "https://www.youtube.com/results?search_query=advanced+react+patterns").
- Prioritize free, high-quality content.

{_JSON_ONLY}
[
  {{
    "id": "<phase identifier>",
    "title": "<phase title>",
    "status": "<Completed|In Progress|Locked>",
    "duration": "<e.g. 4 Weeks>",
    "items": [
      {{
        "title": "<learning item>",
        "status": "<Completed|In Progress|Locked>",
        "subtitle": "<short time estimate or context>",
        "progress": <number 0-100>,
        "resources": [
          {{"title": "<resource title>", "url": "<url>", "type": "<Video|Article|Course|Documentation>"}}
        ]
      }}
    ]
  }}
]"""


def build_weekly_tasks_prompt(current_role: str, target_role: str, focus_area: str) -> str:
    return f"""You are a career coach planning a focused week of practice.

Generate 5 structured weekly tasks for a professional currently in the role of "{current_role}"
aiming to become a "{target_role}".

Crucial: the tasks must specifically focus on "{focus_area}" to bridge the gap between
their current and target role. Mix task types: Learning, Practice, Building.

{_JSON_ONLY}
[
  {{
    "id": "<short unique identifier>",
    "title": "<task title>",
    "type": "<Learning|Practice|Building|Reading>",
    "duration": "<e.g. 2 hours, 45 mins>",
    "status": "Todo",
    "difficulty": "<Easy|Medium|Hard>",
    "description": "<what to do and what done looks like>"
  }}
]"""


def build_resume_extraction_prompt(resume_text: str | None = None) -> str:
    """Resume -> structured profile. The document is either attached inline
    or passed as extracted text."""
    source = "Analyze the attached resume document"
    document = ""
    if resume_text is not None:
        source = "Analyze the resume below"
        document = f"""
RESUME:
---
{resume_text}
---
"""

    return f"""You are an expert HR data extraction assistant.

{source} and extract a comprehensive structured career profile.

EXTRACTION RULES:
1. Extract EVERY work experience entry found. Do not skip early roles.
2. For each role, summarize the key achievements into the 'description'.
3. Extract ALL technical and soft skills mentioned.
4. Infer the candidate's current 'role' from the latest job title.
5. If a summary is missing, write a professional 'bio' based on the experience.
6. Extract location (City, Country) and contact info (email, linkedin_url).
{document}
{_JSON_ONLY}
{{
  "name": "<full name>",
  "role": "<current title>",
  "bio": "<2-3 sentence professional summary>",
  "location": "<City, Country>",
  "email": "<email>",
  "linkedin_url": "<url or empty string>",
  "skills": [
    {{"name": "<skill>", "category": "<Technical|Tools|Soft|Domain|System Design>",
      "level": "<Beginner|Intermediate|Advanced|Expert>"}}
  ],
  "experience": [
    {{"company": "<company>", "role": "<title>", "start_date": "<date>", "end_date": "<date or Present>",
      "description": "<achievements>", "location": "<location>",
      "type": "<Full-time|Contract|Internship>", "skills_used": [<skills>]}}
  ],
  "education": [
    {{"institution": "<institution>", "degree": "<degree>", "year": "<year or range>"}}
  ],
  "certifications": [
    {{"name": "<name>", "issuer": "<issuer>", "date": "<date>"}}
  ],
  "projects": [
    {{"name": "<name>", "description": "<description>", "tech_stack": [<technologies>]}}
  ]
}}"""


def build_project_idea_prompt(target_role: str, skills: list[str], level: str) -> str:
    skills_text = ", ".join(skills) if skills else "general programming"
    return f"""You are a staff engineer mentoring a job seeker.

Generate a detailed software project blueprint designed for the portfolio of an aspiring {target_role}.

The project should:
1. Demonstrate skills relevant to a {target_role}.
2. Use their existing skills: {skills_text}.
3. Be appropriate for a {level} level developer.
4. Be portfolio-worthy and solve a real-world problem.

{_JSON_ONLY}
{{
  "title": "<project title>",
  "description": "<2-3 sentence pitch>",
  "difficulty": "<Beginner|Intermediate|Advanced>",
  "tech_stack": [<technologies>],
  "user_stories": [<3-5 user stories>],
  "features": [<key features>],
  "learning_outcomes": [<what the builder will learn>]
}}"""


def build_job_scan_prompt(role: str, location: str) -> str:
    return f"""You are a recruiter summarizing the current job market.

Simulate a real-time job market scan for the role of {role} in {location}.
Generate 4 realistic job listings relevant to someone targeting this role.
Include a match_score based on typical requirements for this role.

{_JSON_ONLY}
[
  {{
    "id": "<identifier>",
    "title": "<job title>",
    "company": "<company>",
    "location": "<location>",
    "match_score": <number 0-100>,
    "salary_range": "<e.g. $120k - $150k>",
    "missing_skills": [<skills commonly required but often missing>],
    "posted_date": "<e.g. 2 days ago>",
    "type": "<Remote|Hybrid|On-site>"
  }}
]"""


def build_interview_question_prompt(role: str, topic: str) -> str:
    return (
        f"Generate a single challenging interview question for a candidate applying for the role "
        f"of {role}, specifically focusing on {topic}. Keep it concise, under 30 words. "
        f"Reply with the question only."
    )


def build_answer_evaluation_prompt(question: str) -> str:
    return f"""Transcribe the attached audio answer, then evaluate it against the interview question:
"{question}"

{_JSON_ONLY}
{{
  "score": <number 0-100>,
  "feedback": "<at most 2 sentences>",
  "transcript": "<the transcription of the audio>"
}}"""
