"""content.default_pack

Default content pack: AI Cofounder.

Fallback pack and reference content. Deltas are the balance baseline the
meter defaults were tuned against (see engine.sim_runner).
"""

from __future__ import annotations

from core.state import Delta

from .schemas import ChoiceSpec, ContentPack, StepSpec, validate_content_pack


DEFAULT_PACK = ContentPack(
    id="ai-cofounder-default",
    version="1.0.0",
    title="AI Cofounder Startup Simulation",
    description="Navigate the journey of building an AI Cofounder startup from seed funding to global expansion.",
    tags=["startup", "ai", "simulation", "default"],
    steps=[
        StepSpec(
            id=1,
            title="Early Maturity Stage",
            subtitle="Securing the Base",
            scenario="Congrats! You just raised your Seed round. Time to show progress building AI Cofounder.",
            option_a=ChoiceSpec(
                label="Add subscription payments feature",
                body=(
                    "Add a subscription payments feature so founders can pay monthly for their AI buddy. "
                    "Stripe subscriptions go in, with billing tiers for Solo, Team and Enterprise."
                ),
                delta=Delta(R=10, U=4, I=-2),  # revenue focus, investor story lags
                unluck_messages=[
                    "Stripe pushed a surprise API change and half your subscriptions failed. Gains shrank.",
                    "Billing portal worked until compliance flagged you. Revenue paused until the lawyers finish their coffee.",
                ],
            ),
            option_b=ChoiceSpec(
                label="Launch MVP dashboard for investors",
                body=(
                    "Launch an investor dashboard showing how many founders already use their AI Cofounder: "
                    "real-time charts for Founder Signups, Feature Requests and the Founder Happiness Index."
                ),
                delta=Delta(I=10, R=-3),  # investor boost, monetization delayed
                unluck_messages=[
                    "Dashboard looked slick, then crashed five minutes before your board call. Investors stared at 404s.",
                    "Charts were perfect until the data pipeline broke and showed churn at 200%. Panic.",
                ],
            ),
        ),
        StepSpec(
            id=2,
            title="First Customers & Onboarding",
            subtitle="Making Cofounder Sticky",
            scenario="Early adopters are trying your AI Cofounder. The big challenge: do they stick around?",
            option_a=ChoiceSpec(
                label="Create a compelling landing page",
                body=(
                    "Pitch 'Your Cofounder Who Never Sleeps' with a bold, funny landing page: "
                    "replace your cofounder with AI, without the equity drama."
                ),
                delta=Delta(U=8, C=-2),  # top of funnel, onboarding gap
                unluck_messages=[
                    "Your landing page looked great until Google Ads flagged it as spam. Zero clicks.",
                    "A competitor bought your domain typo and half your leads landed there. Brutal.",
                ],
            ),
            option_b=ChoiceSpec(
                label="Build automated onboarding flow",
                body=(
                    "AI Cofounder greets new founders and teaches them what it can do: welcome email, "
                    "product tour and a snarky first chat ('Hi, I'm your smarter half.')."
                ),
                delta=Delta(C=8, U=-2),  # retention, slower funnel
                unluck_messages=[
                    "Emails queued nicely, straight into the spam folder. New users ghosted.",
                    "Your mail provider flagged the welcome sequence as suspicious activity. Blocked.",
                ],
            ),
        ),
        StepSpec(
            id=3,
            title="Growth Stage",
            subtitle="Expanding Capabilities",
            scenario="Founders love AI Cofounder, but now they're asking: can it do more?",
            option_a=ChoiceSpec(
                label="Add collaboration features",
                body=(
                    "Let multiple founders or whole teams share one AI Cofounder account, "
                    "with role-based access and shared workspaces."
                ),
                delta=Delta(U=6, R=5, S=-3),  # growth + revenue, heavier system load
                unluck_messages=[
                    "Collaboration worked until an intern accidentally deleted half the projects.",
                    "Launch was hyped, but the chat platform everyone uses went down the same day. Everyone blamed you.",
                ],
            ),
            option_b=ChoiceSpec(
                label="Add analytics dashboard",
                body=(
                    "Show founders what their Cofounder has done: decks generated, bugs fixed, "
                    "investor emails drafted and arguments resolved."
                ),
                delta=Delta(C=6, I=4, U=-2),
                unluck_messages=[
                    "The analytics impressed until investors misread the churn chart. Panic ensued.",
                    "A timezone bug doubled daily active users. Nobody trusts the numbers now.",
                ],
            ),
        ),
        StepSpec(
            id=4,
            title="Viral Growth Spike",
            subtitle="When Founders Tell Founders",
            scenario="AI Cofounder gets featured on Product Hunt. Thousands of desperate founders sign up overnight.",
            option_a=ChoiceSpec(
                label="Handle server scaling crisis",
                body=(
                    "Servers buckle as thousands of AI Cofounders argue with themselves. "
                    "Autoscaling and monitoring go in before the next wave."
                ),
                delta=Delta(S=10, I=3),
                unluck_messages=[
                    "Autoscaling kicked in and wiped half your staging data. Chaos at scale.",
                    "Traffic surge handled, but you forgot rate limits. Bots ate your free tier.",
                ],
            ),
            option_b=ChoiceSpec(
                label="Set up automated customer support",
                body=(
                    "A support chatbot inside the product answers FAQs like "
                    "'Can my Cofounder raise funding for me while I sleep?'"
                ),
                delta=Delta(C=7, I=4, S=-5),  # love + story, system load risk
                unluck_messages=[
                    "The chatbot replied honestly: 'Have you tried shutting down your company?' Tickets exploded.",
                    "The bot answered everything, then went offline mid-surge. Customers angry, humans swamped.",
                ],
            ),
        ),
        StepSpec(
            id=5,
            title="Global Expansion",
            subtitle="Cofounders Everywhere",
            scenario="Founders around the world want their own AI Cofounder. Time to globalize.",
            option_a=ChoiceSpec(
                label="Add multilingual support",
                body=(
                    "Cofounder brainstorms in Spanish, Japanese or Estonian, "
                    "with its witty comments auto-translated and the humor intact."
                ),
                delta=Delta(U=6, C=5),
                unluck_messages=[
                    "Great translations, except the Japanese tagline now reads 'Hire a Goat as Cofounder.'",
                    "Spanish users were thrilled until accents broke the UI. Half the text boxes overflow.",
                ],
            ),
            option_b=ChoiceSpec(
                label="Enable international payments",
                body=(
                    "Bill in EUR, JPY and BRL through global payment providers, so a founder in Berlin "
                    "can split equity arguments with their AI Cofounder."
                ),
                delta=Delta(R=8, I=3, C=-2),
                unluck_messages=[
                    "Payments launched globally, then the processor froze funds for suspicious founder activity.",
                    "Currency detection worked until the VAT compliance email landed in spam. Surprise bill incoming.",
                ],
            ),
        ),
    ],
)


def get_default_pack() -> ContentPack:
    return DEFAULT_PACK


def validate_default_pack() -> bool:
    """Development guard: the fallback pack itself must always validate."""
    validate_content_pack(DEFAULT_PACK)
    return True
