"""Deterministic content used when AI generation is off or unavailable."""

from uuid import uuid4

from ideaflow.enums import ComponentType
from ideaflow.models import AIFeedback, BusinessSuggestions, ComponentVariation, Variation

UNTITLED = "Untitled Idea"
NO_DESCRIPTION = "No description provided"


def mock_feedback(title: str) -> AIFeedback:
    """Generic SWOT-style feedback mentioning the idea title."""
    return AIFeedback(
        strengths=(
            f"{title or UNTITLED} has a clear value proposition",
            "Addresses a real market need",
            "Potential for scalability",
        ),
        weaknesses=(
            "Target market may be too broad",
            "Revenue model needs refinement",
            "Implementation complexity could be high",
        ),
        opportunities=(
            "Potential for expansion into adjacent markets",
            "Partnership opportunities with complementary services",
            "First-mover advantage in an emerging space",
        ),
        threats=(
            "Competitive landscape is crowded",
            "Technology changes could disrupt the model",
            "Regulatory challenges may arise",
        ),
        suggestions=(
            "Narrow focus to a specific industry vertical initially",
            "Develop a clearer differentiation strategy",
            "Consider a freemium model to accelerate adoption",
        ),
        market_insights=(
            "Market is growing at 15% annually",
            "Early adopters tend to be mid-sized companies",
            "Customer acquisition costs are trending downward",
        ),
        validation_tips=(
            "Interview 10 potential customers in your target market",
            "Create a simple landing page to test messaging",
            "Build a minimum viable product to gather user feedback",
        ),
    )


def mock_variations(title: str, description: str) -> tuple[Variation, ...]:
    """Five stock framings of the idea. Ids are fresh on every call."""
    templates = (
        (
            f"Premium {title}",
            f"A high-end version of {description} targeting luxury market",
            "Premium materials and exclusive features",
            "Affluent professionals and luxury consumers",
            "High margin, subscription-based pricing",
        ),
        (
            f"Budget {title}",
            f"An affordable version of {description} for mass market",
            "Cost-effective solution with essential features",
            "Price-conscious consumers and small businesses",
            "Volume-based, freemium model with upsells",
        ),
        (
            f"Enterprise {title}",
            f"A robust version of {description} for large organizations",
            "Scalable infrastructure with advanced security",
            "Large corporations and government agencies",
            "Annual contracts with service level agreements",
        ),
        (
            f"Mobile {title}",
            f"A portable version of {description} for on-the-go use",
            "Mobility and convenience with cloud sync",
            "Digital nomads and mobile professionals",
            "App store purchases with subscription options",
        ),
        (
            f"{title} Marketplace",
            f"A platform connecting providers and users of {description}",
            "Network effects and community features",
            "Two-sided market of providers and consumers",
            "Transaction fees and premium listings",
        ),
    )
    return tuple(
        Variation(
            id=str(uuid4()),
            title=v_title,
            description=v_description,
            differentiator=differentiator,
            target_market=market,
            revenue_model=revenue,
        )
        for v_title, v_description, differentiator, market, revenue in templates
    )


def mock_business_suggestions() -> BusinessSuggestions:
    """Stock business-model candidates."""
    return BusinessSuggestions(
        target_audience=(
            "Small Business Owners",
            "Startup Founders",
            "Enterprise Companies",
            "Digital Agencies",
            "E-commerce Businesses",
        ),
        sales_channels=(
            "Direct Sales",
            "Online Platform",
            "Partner Network",
            "Resellers",
            "Marketplaces",
        ),
        pricing_model=(
            "Subscription",
            "Usage-based",
            "Freemium",
            "Enterprise",
            "Marketplace Fee",
        ),
        customer_type=(
            "B2B",
            "Enterprise",
            "SMB",
            "Startups",
            "Agencies",
        ),
        integration_needs=(
            "CRM Systems",
            "Payment Processors",
            "Communication Tools",
            "Analytics Platforms",
            "Project Management",
        ),
    )


_COMPONENT_TEXTS: dict[ComponentType, tuple[str, ...]] = {
    ComponentType.PROBLEM_STATEMENT: (
        "Customers struggle with inefficient customer service processes that waste time and resources.",
        "Small businesses lack affordable tools to provide enterprise-grade customer support.",
        "Current customer service solutions are too complex for non-technical users to implement effectively.",
        "Companies are losing customers due to slow response times and poor service experiences.",
        "Remote teams struggle to coordinate customer support across different time zones and channels.",
    ),
    ComponentType.SOLUTION_CONCEPT: (
        "A SaaS platform with AI-powered chatbots that can handle 80% of customer inquiries automatically.",
        "An integrated customer service toolkit with smart routing, knowledge base, and analytics.",
        "A mobile-first customer support app that allows businesses to respond to customers from anywhere.",
        "A hybrid solution combining automated responses with seamless human handoff for complex issues.",
        "A white-label customer service platform that businesses can customize to match their brand.",
    ),
    ComponentType.TARGET_AUDIENCE: (
        "E-commerce businesses with 5-50 employees handling high volumes of similar customer inquiries.",
        "SaaS companies looking to scale their customer support without increasing headcount.",
        "Small retail businesses transitioning to omnichannel sales and support.",
        "Professional service firms (law, accounting, consulting) seeking to improve client communication.",
        "Direct-to-consumer brands focused on providing premium customer experiences.",
    ),
    ComponentType.UNIQUE_VALUE: (
        "Reduces customer service costs by 40% while improving customer satisfaction scores by 25%.",
        "The only solution that seamlessly integrates with all major e-commerce and CRM platforms out of the box.",
        "Provides actionable insights from customer interactions to improve products and services.",
        "Enables small businesses to provide enterprise-level customer service at an affordable price point.",
        "Uses proprietary AI to learn from each interaction, continuously improving response quality.",
    ),
    ComponentType.BUSINESS_MODEL: (
        "Tiered SaaS subscription model with pricing based on volume of customer interactions.",
        "Freemium model with basic features free and advanced AI capabilities as paid upgrades.",
        "Usage-based pricing with monthly minimums and volume discounts for larger customers.",
        "Enterprise licensing model with annual contracts and custom implementation services.",
        "Platform + marketplace model where third-party developers can sell add-ons and integrations.",
    ),
    ComponentType.MARKETING_STRATEGY: (
        "Content marketing focused on customer service ROI and automation best practices.",
        "Partner-led growth through integrations with popular e-commerce and CRM platforms.",
        "Free assessment tool that analyzes current customer service metrics and suggests improvements.",
        "Industry-specific case studies highlighting cost savings and customer satisfaction improvements.",
        "Community-building strategy with forums for customer service professionals to share best practices.",
    ),
    ComponentType.REVENUE_MODEL: (
        "Monthly subscription with tiered pricing based on number of users and features.",
        "Per-seat pricing with unlimited customer interactions and all features included.",
        "Core platform subscription plus usage-based billing for AI-powered interactions.",
        "Annual enterprise contracts with professional services and custom implementation.",
        "Marketplace revenue share from third-party integrations and add-ons.",
    ),
    ComponentType.GO_TO_MARKET: (
        "Target e-commerce segment first with direct sales and content marketing.",
        "Launch with freemium model to build user base, then upsell premium features.",
        "Partner with e-commerce platforms for distribution and co-marketing.",
        "Focus on specific vertical (e.g., fashion retail) to establish strong case studies before expanding.",
        "Use product-led growth with self-service onboarding and in-product upsells.",
    ),
}


def mock_component_variations(component: ComponentType) -> tuple[ComponentVariation, ...]:
    """Five stock candidates for a component, with ids "1" to "5"."""
    return tuple(
        ComponentVariation(id=str(index), text=text)
        for index, text in enumerate(_COMPONENT_TEXTS[component], start=1)
    )
