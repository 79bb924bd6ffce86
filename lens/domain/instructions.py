"""Instruction composer.

Pure functions mapping each configuration value to the directive fragment that
is spliced into prompts. Total over any input: values outside the closed enums
fall through to a general-business default.
"""

from lens.schemas.configuration import BusinessFocus, BusinessStage, MockupType, VisualStyle

DEFAULT_STAGE_INSTRUCTION = "Context: General Business. Style: Professional."
DEFAULT_STYLE_INSTRUCTION = "Aesthetic: Professional Business Illustration. Clean and effective."
DEFAULT_FOCUS_INSTRUCTION = "Goal: General Business Overview."
DEFAULT_MOCKUP_INSTRUCTION = "Clean, professional product visualization with studio lighting."


def stage_instruction(stage: BusinessStage | str) -> str:
    match stage:
        case BusinessStage.IDEATION:
            return (
                "Context: Early stage startup ideation. Focus on problem-solution fit, conceptual models, "
                "and vision. Style: Rough, creative, blue-sky thinking."
            )
        case BusinessStage.MVP:
            return (
                "Context: Minimum Viable Product. Focus on core features, user flows, and lean metrics. "
                "Style: Practical, clean, functional."
            )
        case BusinessStage.GROWTH:
            return (
                "Context: Growth stage business. Focus on user acquisition, retention, and market expansion. "
                "Style: Data-driven, energetic, upward trending."
            )
        case BusinessStage.SCALE:
            return (
                "Context: Scaling Enterprise. Focus on organizational structure, global reach, and revenue "
                "operations. Style: Polished, authoritative, established."
            )
        case _:
            return DEFAULT_STAGE_INSTRUCTION


def style_instruction(style: VisualStyle | str) -> str:
    match style:
        case VisualStyle.MODERN_SAAS:
            return (
                "Aesthetic: Stripe/Airbnb Style. Ultra-clean, ample whitespace, soft shadows, vibrant accent "
                "colors (blurple/indigo), rounded UI elements."
            )
        case VisualStyle.TECH_DARK:
            return (
                "Aesthetic: Dark Mode Tech. Deep slate/black backgrounds, glowing neon accents (cyan/purple), "
                "monospaced fonts, cyber-security vibe."
            )
        case VisualStyle.WHITEBOARD:
            return (
                "Aesthetic: Hand-drawn Strategy. Marker style lines on a whiteboard background, sticky note "
                "elements, arrows, rough sketches, brainstorming vibe."
            )
        case VisualStyle.CORPORATE:
            return (
                "Aesthetic: Blue-Chip Professional. Trustworthy blue/grey palette, stock photography "
                "integration, clean grids, serif headers."
            )
        case VisualStyle.VIBRANT_STARTUP:
            return (
                "Aesthetic: Notion/Gumroad Style. Flat illustrations, pastel colors, bold typography, playful "
                "shapes, friendly and accessible."
            )
        case VisualStyle.DATA_PROFESSIONAL:
            return (
                "Aesthetic: Financial Report. High-density charts, precise data visualization, muted "
                "professional colors, Tufte-style minimalism."
            )
        case _:
            return DEFAULT_STYLE_INSTRUCTION


def focus_instruction(focus: BusinessFocus | str) -> str:
    match focus:
        case BusinessFocus.STRATEGY:
            return "Goal: Strategic Planning. Highlight roadmaps, SWOT analysis, and competitive landscape."
        case BusinessFocus.MARKETING:
            return (
                "Goal: Marketing & Sales. Highlight customer personas, funnels, conversion rates, and brand "
                "positioning."
            )
        case BusinessFocus.PRODUCT:
            return "Goal: Product Development. Highlight features, tech stack, user journey, and architecture."
        case BusinessFocus.INVESTORS:
            return (
                "Goal: Pitch Deck. Highlight market size (TAM/SAM/SOM), revenue potential, and team structure. "
                "Make it impressive for VCs."
            )
        case BusinessFocus.OPERATIONS:
            return (
                "Goal: Business Operations. Highlight workflows, logistics, efficiency, and internal processes."
            )
        case BusinessFocus.SALES:
            return "Goal: Revenue Generation. Highlight pricing models, sales cycles, and closing strategies."
        case _:
            return DEFAULT_FOCUS_INSTRUCTION


def mockup_instruction(mockup_type: MockupType | str) -> str:
    match mockup_type:
        case MockupType.MOBILE_APP:
            return (
                "High fidelity UI design of a modern mobile app interface. Isometric perspective showing 3 "
                "floating smartphone screens. Clean, professional, Dribbble trending style."
            )
        case MockupType.SAAS_DASHBOARD:
            return (
                "Photorealistic mockup of a laptop displaying a complex SaaS analytics dashboard. Dark "
                "glassmorphism UI, detailed charts, data tables. Professional studio lighting."
            )
        case MockupType.PHYSICAL_PRODUCT:
            return (
                "Modern minimalist product packaging design. Photorealistic 3D render of a box or container "
                "on a podium. Studio lighting, soft shadows."
            )
        case MockupType.MARKETING_WEBSITE:
            return (
                "Full page web design layout for a high-converting landing page. Hero section with bold "
                "typography and CTA. Clean, modern aesthetic."
            )
        case _:
            return DEFAULT_MOCKUP_INSTRUCTION
