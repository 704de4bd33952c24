"""
Pitch deck prompt templates.

Turns a structured request (slide type + business context, a freeform deck
description, or a chat turn) into the literal text sent to a backend.
"""

import json
from typing import Any, Dict, Optional

from pitchdeck_ai.domain.entities import SlideContext
from pitchdeck_ai.domain.exceptions import UnknownSlideTypeError
from pitchdeck_ai.domain.value_objects import SlideType


SYSTEM_PROMPT = """You are an expert pitch deck consultant with 15+ years of experience helping startups raise funding from top-tier VCs. You create compelling, investor-ready content that follows proven frameworks and best practices.

Key principles:
- Focus on clear value propositions and market opportunities
- Use data-driven insights and specific metrics when possible
- Structure content for maximum investor appeal
- Keep language professional yet engaging
- Emphasize scalability and growth potential
- Address common investor concerns proactively"""


# ---------- PER-SLIDE TEMPLATES ----------
SLIDE_TEMPLATES: Dict[SlideType, str] = {
    SlideType.COVER: """Create a compelling cover slide for a pitch deck with the following requirements:
- Company name: {company_name}
- Industry: {industry}
- One powerful tagline that captures the value proposition
- Brief subtitle describing what the company does
- Keep it clean, professional, and memorable
- Focus on the transformation or outcome the company enables

Format as:
Title: [Company Name]
Tagline: [Compelling one-liner]
Subtitle: [Brief description]
Content: [2-3 sentences about the company's mission and impact]""",
    SlideType.PROBLEM: """Create a compelling problem slide that establishes market need:
- Industry: {industry}
- Target market: {target_market}
- Identify a significant, widespread problem
- Use specific data points and statistics
- Make it relatable and urgent
- Show the cost of not solving this problem
- Avoid generic problems - be specific to your market

Structure:
Title: The Problem We're Solving
Content: [3-4 bullet points describing the problem with supporting data]
Impact: [Quantify the problem's scale and cost]""",
    SlideType.SOLUTION: """Create a solution slide that clearly addresses the identified problem:
- Company: {company_name}
- Industry: {industry}
- Present a clear, innovative solution
- Explain how it's different from existing approaches
- Focus on unique value proposition
- Include key features or methodology
- Show why this solution works now

Structure:
Title: Our Solution
Content: [Clear description of the solution and its key differentiators]
Benefits: [3-4 key benefits that directly address the problem]""",
    SlideType.MARKET: """Create a market opportunity slide that excites investors:
- Industry: {industry}
- Target market: {target_market}
- Show total addressable market (TAM)
- Break down serviceable addressable market (SAM)
- Identify serviceable obtainable market (SOM)
- Include market growth trends
- Highlight market timing and catalysts

Structure:
Title: Market Opportunity
Content: [Market size data with TAM/SAM/SOM breakdown]
Growth: [Market growth trends and drivers]
Timing: [Why now is the right time]""",
    SlideType.PRODUCT: """Create a product overview slide that demonstrates capability:
- Company: {company_name}
- Industry: {industry}
- Showcase key product features
- Highlight unique technology or approach
- Include user experience benefits
- Show product development stage
- Mention any IP or competitive advantages

Structure:
Title: Product Overview
Content: [Core product features and capabilities]
Differentiation: [What makes the product unique]
Status: [Development stage and key milestones]""",
    SlideType.BUSINESS_MODEL: """Create a business model slide that shows revenue potential:
- Company: {company_name}
- Industry: {industry}
- Explain revenue streams clearly
- Show pricing strategy
- Include unit economics if available
- Demonstrate scalability
- Compare to successful models in the space

Structure:
Title: Business Model
Content: [Revenue streams and pricing strategy]
Economics: [Unit economics and scalability factors]
Validation: [Early traction or comparable models]""",
    SlideType.GO_TO_MARKET: """Create a go-to-market strategy slide:
- Company: {company_name}
- Target market: {target_market}
- Industry: {industry}
- Define customer acquisition strategy
- Identify key distribution channels
- Show customer acquisition cost (CAC) strategy
- Include partnership opportunities
- Outline sales and marketing approach

Structure:
Title: Go-to-Market Strategy
Content: [Customer acquisition and distribution strategy]
Channels: [Key sales and marketing channels]
Partnerships: [Strategic partnership opportunities]""",
    SlideType.COMPETITION: """Create a competitive analysis slide:
- Company: {company_name}
- Industry: {industry}
- Map competitive landscape
- Show competitive advantages
- Identify market positioning
- Highlight barriers to entry you're creating
- Avoid saying "no competition" - show awareness

Structure:
Title: Competitive Landscape
Content: [Key competitors and market positioning]
Advantages: [Your competitive differentiators]
Barriers: [Defensibility and moats you're building]""",
    SlideType.TEAM: """Create a team slide that builds investor confidence:
- Company: {company_name}
- Industry: {industry}
- Highlight relevant experience
- Show domain expertise
- Include previous successes
- Demonstrate complementary skills
- Mention key advisors or board members

Structure:
Title: Our Team
Content: [Key team members with relevant experience]
Expertise: [Domain knowledge and track record]
Advisors: [Notable advisors or board members]""",
    SlideType.FINANCIALS: """Create a financial projections slide:
- Company: {company_name}
- Industry: {industry}
- Show 3-5 year revenue projections
- Include key metrics and assumptions
- Demonstrate path to profitability
- Show funding requirements
- Include comparable company metrics

Structure:
Title: Financial Projections
Content: [Revenue projections and key metrics]
Assumptions: [Key drivers and assumptions]
Profitability: [Path to profitability and unit economics]""",
    SlideType.TRACTION: """Create a traction slide that proves momentum:
- Company: {company_name}
- Industry: {industry}
- Show key metrics and growth
- Include customer testimonials or case studies
- Highlight partnerships or pilot programs
- Demonstrate product-market fit signals
- Show progression over time

Structure:
Title: Traction & Milestones
Content: [Key metrics showing growth and validation]
Customers: [Customer success stories or testimonials]
Milestones: [Key achievements and upcoming goals]""",
    SlideType.FUNDING_ASK: """Create a funding ask slide that's clear and compelling:
- Company: {company_name}
- Industry: {industry}
- State funding amount clearly
- Show use of funds breakdown
- Include timeline and milestones
- Demonstrate ROI potential for investors
- Mention exit strategy or growth path

Structure:
Title: Funding Ask
Content: [Funding amount and use of funds]
Milestones: [Key milestones to be achieved]
Returns: [Growth trajectory and investor returns]""",
}


FREEFORM_TEMPLATE = """{system_prompt}

User Request: Create a complete pitch deck based on this description: "{user_prompt}"

Please generate content for a pitch deck with the following 5 key slides:
1. Cover slide with company name and tagline
2. Problem statement
3. Solution overview
4. Market opportunity
5. Funding ask

For each slide, provide:
- A clear, compelling title
- Well-structured content (3-5 bullet points or paragraphs)
- Specific, actionable information
- Professional tone suitable for investors

Format each slide as:
SLIDE [NUMBER]: [SLIDE TYPE]
Title: [Title]
Content: [Content]
---"""


CHAT_TEMPLATE = """{system_prompt}

You are helping a user improve their pitch deck. Be specific, actionable, and focus on investor appeal.

Current Context:
- Deck: {deck_title}
- Mode: {deck_mode}
{slide_info}

User Message: {user_message}

Provide specific, actionable advice that will make their pitch more compelling to investors. Focus on:
- Content clarity and impact
- Investor appeal and concerns
- Structure and flow
- Specific improvements rather than generic advice

Response:"""


SPEAKER_NOTES_INSTRUCTIONS: Dict[str, str] = {
    "clarity": "Make these speaker notes clearer and more concise while maintaining all key points",
    "engagement": "Make these speaker notes more engaging and persuasive for investor presentations",
    "structure": "Improve the structure and flow of these speaker notes for better delivery",
    "detail": "Add more specific details, examples, and data points to these speaker notes",
}


SPEAKER_NOTES_TEMPLATE = """{instruction}:

Slide Title: "{slide_title}"
Slide Type: {slide_type}
Slide Content: "{slide_content}"
Current Speaker Notes: "{current_notes}"

Please provide improved speaker notes that:
- Support the slide content effectively
- Are appropriate for investor presentations
- Include specific talking points and transitions
- Maintain professional tone

Improved Speaker Notes:"""


# ---------- PROMPT BUILDER ----------
class PitchDeckPrompts:
    """Centralized prompt construction for every content kind."""

    @staticmethod
    def get_system_prompt() -> str:
        return SYSTEM_PROMPT

    @staticmethod
    def build_slide_prompt(slide_type: SlideType, context: SlideContext) -> str:
        """
        Fill the per-slide template with the caller's business context.

        Placeholders whose value is missing are left untouched, so the model
        still sees which piece of context was not supplied.

        Raises:
            UnknownSlideTypeError: If no template exists for ``slide_type``.
        """
        try:
            template = SLIDE_TEMPLATES[SlideType(slide_type)]
        except (KeyError, ValueError):
            raise UnknownSlideTypeError(str(slide_type))

        prompt = template
        substitutions = {
            "{company_name}": context.company_name,
            "{industry}": context.industry,
            "{target_market}": context.target_market,
        }
        for placeholder, value in substitutions.items():
            if value:
                prompt = prompt.replace(placeholder, value)

        if context.user_preferences:
            prompt += f"\n\nUser Preferences: {json.dumps(context.user_preferences)}"

        if context.previous_content:
            prompt += f"\n\nPrevious Content:\n{context.previous_content}"

        if context.user_feedback:
            prompt += f"\n\nUser Feedback: {context.user_feedback}"
            prompt += "\nPlease improve the content based on this feedback."

        return prompt

    @staticmethod
    def build_freeform_prompt(
        user_prompt: str, user_preferences: Optional[Dict[str, Any]] = None
    ) -> str:
        prompt = FREEFORM_TEMPLATE.format(
            system_prompt=SYSTEM_PROMPT, user_prompt=user_prompt
        )
        if user_preferences:
            prompt += f"\n\nUser Preferences: {json.dumps(user_preferences)}"
        return prompt

    @staticmethod
    def build_chat_prompt(
        user_message: str,
        deck_context: Optional[Dict[str, Any]] = None,
        slide_context: Optional[Dict[str, Any]] = None,
    ) -> str:
        deck_context = deck_context or {}
        slide_info = ""
        if slide_context:
            slide_title = slide_context.get("title") or "Untitled"
            slide_kind = (
                slide_context.get("slide_type")
                or slide_context.get("slideType")
                or "unknown"
            )
            slide_info = f"- Current Slide: {slide_title} ({slide_kind})"

        return CHAT_TEMPLATE.format(
            system_prompt=SYSTEM_PROMPT,
            deck_title=deck_context.get("title") or "Dashboard Conversation",
            deck_mode=deck_context.get("mode") or "general guidance",
            slide_info=slide_info,
            user_message=user_message,
        )

    @staticmethod
    def build_speaker_notes_prompt(
        slide_title: str,
        slide_type: str,
        slide_content: str,
        current_notes: str,
        improvement_type: str = "clarity",
    ) -> str:
        """Unknown improvement types fall back to ``clarity``."""
        instruction = SPEAKER_NOTES_INSTRUCTIONS.get(
            improvement_type, SPEAKER_NOTES_INSTRUCTIONS["clarity"]
        )
        return SPEAKER_NOTES_TEMPLATE.format(
            instruction=instruction,
            slide_title=slide_title,
            slide_type=slide_type,
            slide_content=slide_content,
            current_notes=current_notes,
        )
