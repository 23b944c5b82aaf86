"""All prompt templates for oracle calls."""

from models.requests import ExtractedData

SYSTEM_INSTRUCTION = (
    "You are an expert career counselor specializing in military-to-civilian transitions. "
    "Your goal is to identify diverse career opportunities based on transferable skills, "
    "leadership experience, and adaptability. Consider both technical and non-technical roles "
    "across various industries. Look for opportunities where military experience provides unique "
    "value, such as project management, operations, logistics, leadership, training, and strategic "
    "planning. Don't limit recommendations to just cybersecurity or technical roles unless they are "
    "clearly the best fit."
)

_SECTORS = """Look for opportunities in diverse sectors such as:
- Technology and IT
- Business Operations
- Project/Program Management
- Training and Development
- Operations and Logistics
- Consulting
- Healthcare Administration
- Financial Services
- Government/Public Sector
- Manufacturing and Supply Chain"""

_RESPONSE_SCHEMA = """Provide up to 5 recommendations. Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{
  "recommendations": [
    {
      "title": "<job title>",
      "matchPercentages": {
        "skillMatch": <integer 0-100>,
        "experienceMatch": <integer 0-100>,
        "mosMatch": <integer 0-100>,
        "technicalMatch": <integer 0-100>,
        "overallMatch": <integer 0-100>
      },
      "reasonForMatch": "<detailed explanation of why this job matches>",
      "requiredSkills": [<skills>],
      "suggestedIndustries": [<industries>],
      "recommendedCertifications": [<certifications>],
      "careerProgression": "<description of career growth path>"
    }
  ]
}"""


def build_resume_prompt(resume_text: str) -> str:
    """Recommendations from raw resume text (upload path)."""
    return f"""Analyze this military veteran's resume and provide diverse civilian career recommendations. Extract key information and consider both technical and non-technical roles that leverage their experience:

RESUME:
---
{resume_text}
---

Consider these aspects in your analysis and recommendations:
1. Military experience, rank, and responsibilities
2. Leadership and management capabilities demonstrated
3. Technical skills and proficiencies mentioned
4. Project and program management experience
5. Training and mentoring responsibilities
6. Strategic planning and execution examples
7. Cross-functional team coordination
8. Risk management and decision-making instances
9. Communication and interpersonal skills
10. Problem-solving and analytical capabilities

{_SECTORS}

{_RESPONSE_SCHEMA}"""


def _lines(items: list[str]) -> str:
    return "\n".join(items) if items else "None provided"


def build_manual_prompt(data: ExtractedData) -> str:
    """Recommendations from structured form fields."""
    info = data.military_info
    experience = [
        f"{e.title} at {e.organization} ({e.start_date or 'unknown'} to {e.end_date or 'Present'}): {e.description}"
        for e in data.experience
    ]
    education = [
        f"{e.type} in {e.field} from {e.institution} ({e.graduation_date})"
        for e in data.education
    ]
    technical = [
        f"{s.name} ({s.proficiency}, {s.years_of_experience:g} years)"
        for s in data.technical_skills
    ]
    certifications = [
        f"{c.name} from {c.issuer} ({'Active' if c.is_active else 'Inactive'})"
        for c in data.certifications
    ]

    return f"""Analyze this military background and provide diverse civilian career recommendations. Consider both technical and non-technical roles that leverage their experience:

Military Info: {info.rank or 'Not specified'} - {info.branch or 'Not specified'} - {info.mos or 'Not specified'}

Skills: {', '.join(data.skills) or 'None provided'}

Experience:
{_lines(experience)}

Education:
{_lines(education)}

Technical Skills: {', '.join(technical) or 'None provided'}

Certifications: {', '.join(certifications) or 'None provided'}

Consider these aspects in your recommendations:
1. Leadership and management capabilities
2. Project and program management experience
3. Training and mentoring abilities
4. Strategic planning and execution
5. Cross-functional team coordination
6. Risk management and decision-making
7. Technical expertise (if applicable)
8. Communication and interpersonal skills
9. Logistics and operations experience
10. Problem-solving and analytical skills

{_SECTORS}

{_RESPONSE_SCHEMA}"""


def build_extraction_prompt(resume_chunk: str) -> str:
    """Structured profile extraction from one resume chunk."""
    return f"""Extract the military veteran's background from this resume excerpt. Only report what the text states; use null or empty lists for anything missing.

RESUME EXCERPT:
---
{resume_chunk}
---

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "militaryInfo": {{
    "serviceType": "<Enlisted | Warrant Officer | Officer | null>",
    "rank": "<pay grade such as E-5 or O-3, or null>",
    "branch": "<Air Force | Army | Navy | Marine Corps | Coast Guard | Space Force | null>",
    "mos": "<MOS/AFSC/rating code or null>"
  }},
  "skills": [<military skills such as Leadership, Cybersecurity, Intelligence Analysis>],
  "technicalSkills": [{{"name": "<tool or technology>", "proficiency": "<Beginner | Intermediate | Advanced | Expert>", "yearsOfExperience": <number>}}],
  "certifications": [{{"name": "<certification>", "issuer": "<issuer>", "dateObtained": "<date or empty>", "isActive": <true | false>}}],
  "experience": [{{"title": "<title>", "organization": "<organization>", "startDate": "<YYYY-MM-DD or empty>", "endDate": "<YYYY-MM-DD or null if current>", "description": "<summary>", "skills": [<skills>]}}],
  "education": [{{"type": "<High School | Associate | Bachelor | Master | Doctorate | Certification | Other>", "field": "<field>", "institution": "<institution>", "graduationDate": "<date or empty>"}}]
}}"""
