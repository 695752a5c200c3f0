from __future__ import annotations

from typing import Dict, Union

from app.core import AnalysisType
from app.errors import InvalidArgumentError

SYSTEM_PROMPT = (
    "You are an expert HR professional. Use the following scoring criteria: "
    "Score Range: 90-100 (Excellent), 80-89 (Very Good), 70-79 (Good), 60-69 (Fair), "
    "50-59 (Needs Work), <50 (Poor). For Comprehensive Analysis, evaluate: "
    "Content Quality (25%), Achievement Demo (20%), Format (15%), ATS Optimization (15%), "
    "Language (15%), Completeness (10%). Provide specific scores for each category and overall score."
)

RESUME_CONTENT_HEADER = "\n\nResume Content:\n"

_COMPREHENSIVE = """Please conduct a comprehensive analysis of this resume. Provide detailed feedback on:

1. **Overall Impression & Strengths**
   - First impression when reviewing the resume
   - Key strengths and standout qualities
   - Most compelling aspects of the candidate's profile

2. **Areas for Improvement**
   - Specific sections that need enhancement
   - Missing information that should be included
   - Content that could be better organized or presented

3. **Skills Assessment**
   - Technical skills relevance and depth
   - Soft skills presentation and evidence
   - Skills gaps for the candidate's target roles
   - Recommendations for skill development

4. **Experience Evaluation**
   - Career progression and growth trajectory
   - Achievement descriptions and quantifiable impact
   - Relevance to target positions
   - Work experience presentation quality

5. **Format & Structure Analysis**
   - Overall layout and visual appeal
   - Section organization and flow
   - Readability and professional presentation
   - ATS (Applicant Tracking System) compatibility

6. **Specific Recommendations**
   - Actionable steps to improve the resume
   - Industry-specific suggestions
   - Content optimization strategies

7. **Overall Score (1-100)**"""

_SKILLS = """Please focus specifically on analyzing the skills section of this resume. Provide detailed evaluation on:

1. **Technical Skills Analysis**
   - Relevance of listed technical skills to target roles
   - Depth and breadth of technical expertise
   - Current vs. outdated technologies
   - Skill categorization and organization

2. **Soft Skills Presentation**
   - How soft skills are demonstrated through examples
   - Evidence and context provided for soft skills claims
   - Balance between technical and interpersonal skills

3. **Skills Gaps & Opportunities**
   - Missing skills that are highly valued in the candidate's field
   - Emerging technologies or methodologies to consider
   - Skills that could be better highlighted or repositioned

4. **Skills Organization & Presentation**
   - Clarity and structure of skills section
   - Use of categories, levels, or proficiency indicators
   - Visual presentation and readability

5. **Industry Alignment**
   - How well skills align with current industry demands
   - Competitive advantage of the skill set
   - Market relevance and transferability

6. **Improvement Recommendations**
   - Specific skills to add, remove, or reorganize
   - Ways to better demonstrate skill proficiency
   - Strategic skill development suggestions

7. **Skills Score (1-100)**"""

_EXPERIENCE = """Please analyze the work experience section of this resume in detail. Focus on:

1. **Career Progression Analysis**
   - Logical career advancement and growth trajectory
   - Role progression and increasing responsibilities
   - Career transitions and their strategic value
   - Timeline consistency and employment gaps

2. **Achievement Descriptions & Impact**
   - Quality of accomplishment statements
   - Use of quantifiable metrics and results
   - Demonstration of value delivered to employers
   - Evidence of problem-solving and initiative

3. **Relevance to Target Roles**
   - Alignment with likely career objectives
   - Transferable skills and experiences
   - Industry experience and domain knowledge
   - Leadership and collaboration examples

4. **Content Quality & Presentation**
   - Clarity and conciseness of descriptions
   - Use of strong action verbs and professional language
   - Consistency in formatting and style
   - Appropriate level of detail for each role

5. **Professional Brand & Narrative**
   - Coherent professional story and positioning
   - Unique value proposition demonstration
   - Consistency with overall career theme

6. **Areas of Concern**
   - Employment gaps or frequent job changes
   - Lack of progression or stagnation indicators
   - Missing context or insufficient detail
   - Potential red flags for employers

7. **Strategic Recommendations**
   - How to better position work experience
   - Content to add, modify, or remove
   - Ways to strengthen achievement statements

8. **Experience Score (1-100)**"""

_FORMATTING = """Please evaluate the format and structure of this resume with focus on:

1. **Overall Layout & Visual Appeal**
   - Professional appearance and first impression
   - Use of white space and visual hierarchy
   - Font choices, sizing, and consistency
   - Overall design aesthetic and modern appeal

2. **Section Organization & Flow**
   - Logical order and progression of sections
   - Appropriate section headers and transitions
   - Information architecture and user experience
   - Strategic placement of key information

3. **Readability & Accessibility**
   - Ease of scanning and information retrieval
   - Text density and paragraph structure
   - Use of bullet points and formatting elements
   - Clarity of contact information and key details

4. **Professional Standards**
   - Adherence to industry formatting conventions
   - Appropriate length and content density
   - Consistency in style and presentation
   - Professional tone and language usage

5. **ATS (Applicant Tracking System) Compatibility**
   - Machine-readable format considerations
   - Keyword optimization and placement
   - Section headers and standard terminology
   - File format and technical compatibility

6. **Content Structure & Hierarchy**
   - Information prioritization and emphasis
   - Strategic use of formatting for key points
   - Balance between sections and content areas
   - Effective use of formatting to guide attention

7. **Industry & Role Appropriateness**
   - Format suitability for target industries
   - Creative vs. conservative formatting choices
   - Alignment with professional expectations

8. **Specific Formatting Recommendations**
   - Concrete suggestions for layout improvements
   - Technical formatting adjustments
   - Content reorganization strategies

9. **Format Score (1-100)**"""

TEMPLATES: Dict[AnalysisType, str] = {
    AnalysisType.comprehensive: _COMPREHENSIVE,
    AnalysisType.skills: _SKILLS,
    AnalysisType.experience: _EXPERIENCE,
    AnalysisType.formatting: _FORMATTING,
}

def check_templates(templates: Dict[AnalysisType, str]) -> None:
    missing = set(AnalysisType) - set(templates)
    if missing:
        raise RuntimeError(f"missing prompt template for: {sorted(t.value for t in missing)}")


check_templates(TEMPLATES)


def parse_analysis_type(value: Union[str, AnalysisType, None]) -> AnalysisType:
    if isinstance(value, AnalysisType):
        return value
    try:
        return AnalysisType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in AnalysisType)
        raise InvalidArgumentError(f"Invalid analysis type: {value!r}. Expected one of: {allowed}")


def build_prompt(analysis_type: Union[str, AnalysisType], text: str) -> str:
    kind = parse_analysis_type(analysis_type)
    return TEMPLATES[kind] + RESUME_CONTENT_HEADER + text
