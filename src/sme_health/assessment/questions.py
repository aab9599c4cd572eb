"""
SME Business Health Assessment Questions

Critical questionnaire organized by category:
1. Financial Health
2. Operational Resilience
3. Market Position
4. Compliance Risk
5. Growth Readiness

Each question has:
- ID and category assignment
- Question text and insight text
- Answer type (multiple choice, percentage, number, yes/no, scale)
- Weight for importance within its category
- Optional critical threshold, business-killer flag and display conditions
- For multiple choice: options with a score (0-100), risk level and a stable tag

Rules consume option tags, never option text, so the wording here can be
edited freely without breaking risk detection.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class QuestionType(Enum):
    """Supported answer types."""
    MULTIPLE = "multiple"
    PERCENTAGE = "percentage"
    NUMBER = "number"
    YES_NO = "yes_no"
    SCALE = "scale"


class Category(Enum):
    """The five scored business categories."""
    FINANCIAL_HEALTH = "financial_health"
    OPERATIONAL_RESILIENCE = "operational_resilience"
    MARKET_POSITION = "market_position"
    COMPLIANCE_RISK = "compliance_risk"
    GROWTH_READINESS = "growth_readiness"


class OptionRiskLevel(Enum):
    """Qualitative risk attached to a multiple-choice option."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ConditionOperator(Enum):
    """Comparison used by a display condition."""
    EQUALS = "equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    CONTAINS = "contains"


@dataclass(frozen=True)
class QuestionOption:
    """A single multiple-choice option."""
    text: str
    score: float  # 0-100
    risk_level: OptionRiskLevel
    tag: str
    insight: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "score": self.score,
            "risk_level": self.risk_level.value,
            "tag": self.tag,
            "insight": self.insight
        }


@dataclass(frozen=True)
class DisplayCondition:
    """Show a question only when an earlier answer satisfies this check."""
    depends_on: str
    operator: ConditionOperator
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {
            "depends_on": self.depends_on,
            "operator": self.operator.value,
            "value": self.value
        }


@dataclass(frozen=True)
class ValidationRule:
    """Input rule checked before an answer is accepted ("range" or "pattern")."""
    type: str
    rule: Any
    message: str


@dataclass(frozen=True)
class Question:
    """A single assessment question."""
    id: str
    question: str
    type: QuestionType
    category: Category
    weight: float
    options: Tuple[QuestionOption, ...] = ()
    critical_threshold: Optional[float] = None
    business_killer: bool = False
    insight: str = ""
    conditions: Tuple[DisplayCondition, ...] = ()
    validators: Tuple[ValidationRule, ...] = ()
    local_context: Dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def is_numeric(self) -> bool:
        return self.type in (QuestionType.PERCENTAGE, QuestionType.NUMBER)

    def find_option(self, answer: Any) -> Optional[QuestionOption]:
        """Resolve an answer given as option text or option tag."""
        for option in self.options:
            if answer == option.text or answer == option.tag:
                return option
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "type": self.type.value,
            "category": self.category.value,
            "weight": self.weight,
            "options": [o.to_dict() for o in self.options],
            "critical_threshold": self.critical_threshold,
            "business_killer": self.business_killer,
            "insight": self.insight,
            "conditions": [c.to_dict() for c in self.conditions],
            "local_context": dict(self.local_context)
        }


# Category definitions
CATEGORIES = {
    "financial_health": {
        "id": "financial_health",
        "name": "Financial Health",
        "description": "Cash runway, margins, receivables and reserves - the most critical area for survival"
    },
    "operational_resilience": {
        "id": "operational_resilience",
        "name": "Operational Resilience",
        "description": "Ability to keep operating through shocks, outages and absences"
    },
    "market_position": {
        "id": "market_position",
        "name": "Market Position",
        "description": "Customer concentration and competitive differentiation"
    },
    "compliance_risk": {
        "id": "compliance_risk",
        "name": "Compliance Risk",
        "description": "Tax and regulatory standing - issues here can shut a business overnight"
    },
    "growth_readiness": {
        "id": "growth_readiness",
        "name": "Growth Readiness",
        "description": "Records, payment channels and market access needed to grow"
    }
}

# Shared validation rules
PERCENTAGE_RANGE = ValidationRule("range", (0, 100), "Please enter a percentage between 0 and 100")
SCALE_RANGE = ValidationRule("range", (1, 10), "Please choose a value between 1 and 10")


def _option(text: str, score: float, risk: str, tag: str, insight: Optional[str] = None) -> QuestionOption:
    return QuestionOption(text, score, OptionRiskLevel(risk), tag, insight)


# Assessment questions organized by category
ASSESSMENT_QUESTIONS: List[Question] = [
    # =========================================================================
    # FINANCIAL HEALTH - Most critical for survival
    # =========================================================================
    Question(
        id="cash_runway_days",
        question="Based on your current expenses, how many days can your business operate without any new revenue?",
        type=QuestionType.MULTIPLE,
        category=Category.FINANCIAL_HEALTH,
        business_killer=True,
        options=(
            _option("90+ days - Strong cash reserves", 100, "low", "days_90_plus"),
            _option("60-89 days - Adequate reserves", 80, "low", "days_60_89"),
            _option("30-59 days - Concerning level", 50, "medium", "days_30_59"),
            _option("15-29 days - High risk territory", 25, "high", "days_15_29"),
            _option("Less than 15 days - Critical danger", 10, "critical", "days_under_15"),
        ),
        weight=0.20,
        insight="78% of Ghanaian SMEs fail due to cash flow problems. Less than 30 days runway puts you in immediate danger.",
        local_context={
            "local_context": "Ghana's irregular payment cycles and economic volatility make cash reserves critical",
            "regulatory_implications": "Bank lending is expensive (25-30% interest), making self-funding essential",
            "market_reality": "Customers often delay payments by 60-90 days, especially government contracts"
        }
    ),
    Question(
        id="receivables_aging",
        question="What percentage of your sales revenue is currently stuck in receivables older than 90 days?",
        type=QuestionType.PERCENTAGE,
        category=Category.FINANCIAL_HEALTH,
        business_killer=True,
        weight=0.15,
        critical_threshold=30,
        validators=(PERCENTAGE_RANGE,),
        insight="Over 30% in old receivables indicates severe cash flow issues that can kill your business",
        local_context={
            "local_context": "Ghana's payment culture often delays business payments",
            "regulatory_implications": "No legal framework for quick debt collection",
            "market_reality": "Many businesses fail not from lack of sales, but from inability to collect"
        }
    ),
    Question(
        id="customer_concentration_risk",
        question="What percentage of your total revenue comes from your top 3 customers?",
        type=QuestionType.PERCENTAGE,
        category=Category.MARKET_POSITION,
        business_killer=True,
        weight=0.15,
        critical_threshold=60,
        validators=(PERCENTAGE_RANGE,),
        insight="Over 60% customer concentration is extremely dangerous - one customer loss could destroy you",
        local_context={
            "local_context": "Ghana's small market makes customer concentration a common trap",
            "market_reality": "Large customers (banks, telcos, government) often dominate SME revenue"
        }
    ),
    Question(
        id="profit_margin_reality",
        question="What is your actual net profit margin after ALL expenses (including your salary)?",
        type=QuestionType.MULTIPLE,
        category=Category.FINANCIAL_HEALTH,
        business_killer=True,
        options=(
            _option("Above 25% - Excellent profitability", 100, "low", "margin_above_25"),
            _option("15-25% - Good profitability", 80, "low", "margin_15_25"),
            _option("10-15% - Acceptable but tight", 60, "medium", "margin_10_15"),
            _option("5-10% - Dangerously thin margins", 30, "high", "margin_5_10"),
            _option("Below 5% or breakeven - Unsustainable", 10, "critical", "margin_below_5"),
        ),
        weight=0.18,
        insight="Businesses with margins below 10% cannot survive economic shocks or invest in growth",
        local_context={
            "local_context": "Ghana's inflation and currency volatility erode thin margins quickly",
            "market_reality": "Many SMEs think they're profitable but haven't accounted for all costs"
        }
    ),

    # =========================================================================
    # GHANA-SPECIFIC CRITICAL QUESTIONS
    # =========================================================================
    Question(
        id="mobile_money_integration",
        question="What percentage of your customer payments do you accept via Mobile Money (MTN, Vodafone, AirtelTigo)?",
        type=QuestionType.PERCENTAGE,
        category=Category.GROWTH_READINESS,
        weight=0.12,
        validators=(PERCENTAGE_RANGE,),
        insight="Ghana has 40M+ mobile money users. Businesses not accepting mobile payments lose 30%+ potential customers",
        local_context={
            "local_context": "Mobile Money is the dominant payment method in Ghana, with over 40 million active users",
            "market_reality": "Customers increasingly prefer mobile payments for convenience and security"
        }
    ),
    Question(
        id="forex_exposure_risk",
        question="What percentage of your business costs (supplies, equipment, rent) are paid in foreign currency?",
        type=QuestionType.PERCENTAGE,
        category=Category.OPERATIONAL_RESILIENCE,
        business_killer=True,
        weight=0.13,
        critical_threshold=40,
        validators=(PERCENTAGE_RANGE,),
        insight="Cedi depreciation can destroy businesses with high forex exposure - many SMEs lost 30-50% margins in 2022",
        local_context={
            "local_context": "Ghana Cedi frequently depreciates against USD/EUR, creating major cost pressures",
            "regulatory_implications": "Bank of Ghana policies can restrict forex access during crises",
            "market_reality": "Importers and businesses with dollar costs face severe margin pressure"
        }
    ),
    Question(
        id="government_contract_readiness",
        question="Are you qualified and ready to bid for government contracts in your sector?",
        type=QuestionType.MULTIPLE,
        category=Category.GROWTH_READINESS,
        options=(
            _option("Yes, fully qualified with all requirements met", 100, "low", "fully_qualified"),
            _option("Partially qualified, missing some certifications", 70, "medium", "partially_qualified"),
            _option("Not qualified but working towards it", 40, "high", "working_towards"),
            _option("No interest or qualification for government contracts", 20, "medium", "not_pursuing"),
        ),
        weight=0.09,
        insight="Government contracts represent 25%+ of Ghana's economy - missing this opportunity limits growth",
        local_context={
            "local_context": "Government is largest buyer in Ghana economy across all sectors",
            "regulatory_implications": "Requires specific certifications, tax compliance, and local content requirements",
            "market_reality": "Government contracts provide stable, large-volume revenue opportunities"
        }
    ),
    Question(
        id="local_content_compliance",
        question="Does your business meet Ghana's Local Content requirements for your industry?",
        type=QuestionType.MULTIPLE,
        category=Category.COMPLIANCE_RISK,
        business_killer=True,
        options=(
            _option("Yes, fully compliant with local content requirements", 100, "low", "fully_compliant"),
            _option("Mostly compliant, minor gaps", 75, "medium", "minor_gaps"),
            _option("Partially compliant, working on improvements", 50, "high", "partially_compliant"),
            _option("Not compliant or unaware of requirements", 10, "critical", "not_compliant"),
        ),
        weight=0.08,
        insight="Local Content laws can exclude non-compliant businesses from major opportunities, especially oil & gas, mining",
        local_context={
            "local_context": "Ghana Local Content Act requires minimum local participation in key industries",
            "regulatory_implications": "Non-compliance excludes you from major contracts in oil, gas, mining sectors",
            "market_reality": "Local content creates opportunities for compliant Ghanaian businesses"
        }
    ),
    Question(
        id="ecowas_afcfta_readiness",
        question="Is your business positioned to take advantage of ECOWAS and AfCFTA trade opportunities?",
        type=QuestionType.MULTIPLE,
        category=Category.GROWTH_READINESS,
        options=(
            _option("Yes, actively exporting/importing within Africa", 100, "low", "actively_trading"),
            _option("Prepared but not yet trading regionally", 80, "low", "prepared"),
            _option("Exploring opportunities, some preparation", 60, "medium", "exploring"),
            _option("No awareness or preparation for regional trade", 30, "high", "unaware"),
        ),
        weight=0.07,
        insight="AfCFTA creates 1.2B person market - early movers gain significant competitive advantages",
        local_context={
            "local_context": "Africa Continental Free Trade Area eliminates 90% of tariffs between African countries",
            "market_reality": "Massive market expansion opportunity for prepared businesses"
        }
    ),
    Question(
        id="power_stability_management",
        question="How do you manage Ghana's power instability issues (dumsor) in your business?",
        type=QuestionType.MULTIPLE,
        category=Category.OPERATIONAL_RESILIENCE,
        business_killer=True,
        options=(
            _option("Multiple backup systems (generator, UPS, solar)", 100, "low", "multiple_backups"),
            _option("One reliable backup system", 80, "low", "single_backup"),
            _option("Basic backup, sometimes inadequate", 50, "medium", "basic_backup"),
            _option("No backup systems, operations stop during outages", 10, "critical", "no_backup"),
        ),
        weight=0.08,
        insight="Power instability kills productivity and customer confidence - backup systems are essential for business continuity",
        local_context={
            "local_context": "Ghana faces periodic power instability affecting all sectors",
            "market_reality": "Businesses without backup power lose productivity, revenue, and customer trust"
        }
    ),
    Question(
        id="cocoa_commodity_exposure",
        question="How exposed is your business to cocoa/commodity price fluctuations?",
        type=QuestionType.MULTIPLE,
        category=Category.FINANCIAL_HEALTH,
        options=(
            _option("Not exposed to commodity prices", 100, "low", "not_exposed"),
            _option("Indirectly exposed through customers/suppliers", 70, "medium", "indirect"),
            _option("Moderately exposed, some price hedging", 50, "medium", "hedged"),
            _option("Highly exposed, no price protection", 20, "high", "unhedged"),
        ),
        weight=0.06,
        insight="Cocoa price swings affect entire Ghana economy - diversification reduces commodity risk",
        local_context={
            "local_context": "Ghana is world's 2nd largest cocoa producer, price changes affect entire economy",
            "market_reality": "Commodity price volatility creates economic ripple effects throughout Ghana"
        }
    ),

    # =========================================================================
    # COMPLIANCE RISK - Can shut you down overnight
    # =========================================================================
    Question(
        id="gra_tax_compliance",
        question="What is your current status with Ghana Revenue Authority (GRA) tax obligations?",
        type=QuestionType.MULTIPLE,
        category=Category.COMPLIANCE_RISK,
        business_killer=True,
        options=(
            _option("Fully compliant and up-to-date", 100, "low", "fully_compliant"),
            _option("Minor delays but communicating with GRA", 70, "medium", "minor_delays"),
            _option("Several months behind on payments", 30, "high", "months_behind"),
            _option("Significantly behind or not registered", 10, "critical", "behind_or_unregistered"),
        ),
        weight=0.12,
        insight="GRA can freeze accounts and shut down non-compliant businesses without warning",
        local_context={
            "local_context": "GRA enforcement has increased significantly",
            "regulatory_implications": "Tax clearance certificates required for many business activities",
            "market_reality": "Non-compliance can result in immediate business closure"
        }
    ),

    # =========================================================================
    # OPERATIONAL RESILIENCE
    # =========================================================================
    Question(
        id="key_person_dependency",
        question="If you (the owner) were unable to work for 3 months, what would happen to your business?",
        type=QuestionType.MULTIPLE,
        category=Category.OPERATIONAL_RESILIENCE,
        business_killer=True,
        options=(
            _option("Business would continue operating normally", 100, "low", "continues_normally"),
            _option("Some disruption but would survive", 70, "medium", "some_disruption"),
            _option("Significant problems but might survive", 40, "high", "significant_problems"),
            _option("Business would likely collapse", 10, "critical", "likely_collapse"),
        ),
        weight=0.14,
        insight="Over-dependence on owner is a major business killer in Ghana SMEs",
        local_context={
            "local_context": "Family business culture creates single points of failure",
            "market_reality": "Owner illness or travel can destroy business operations"
        }
    ),
    Question(
        id="supplier_dependency",
        question="How dependent are you on your top supplier? (% of total purchases)",
        type=QuestionType.PERCENTAGE,
        category=Category.OPERATIONAL_RESILIENCE,
        weight=0.10,
        critical_threshold=70,
        validators=(PERCENTAGE_RANGE,),
        insight="Over 70% supplier dependency creates dangerous vulnerability",
        local_context={
            "local_context": "Limited supplier options in Ghana markets",
            "market_reality": "Supplier problems can immediately halt operations"
        }
    ),

    # =========================================================================
    # MARKET POSITION
    # =========================================================================
    Question(
        id="competitive_differentiation",
        question="What makes your business different from competitors?",
        type=QuestionType.MULTIPLE,
        category=Category.MARKET_POSITION,
        options=(
            _option("Unique product/service with strong brand", 100, "low", "unique_brand"),
            _option("Better quality or service than competitors", 80, "low", "better_quality"),
            _option("Lower prices than competitors", 40, "medium", "lower_prices"),
            _option("Nothing significant - we compete on price only", 20, "high", "price_only"),
        ),
        weight=0.08,
        insight="Businesses competing only on price have no sustainable advantage",
        local_context={
            "local_context": "Price competition is fierce in Ghana markets",
            "market_reality": "Differentiation is key to avoiding race-to-the-bottom pricing"
        }
    ),

    # =========================================================================
    # GROWTH READINESS
    # =========================================================================
    Question(
        id="financial_records_quality",
        question="How would you rate your financial record-keeping?",
        type=QuestionType.MULTIPLE,
        category=Category.GROWTH_READINESS,
        options=(
            _option("Professional accounting system with monthly reports", 100, "low", "professional"),
            _option("Basic system with quarterly summaries", 70, "low", "basic_system"),
            _option("Simple records, updated irregularly", 40, "medium", "simple_records"),
            _option("Minimal or no formal record-keeping", 10, "high", "minimal"),
        ),
        weight=0.10,
        insight="Poor financial records prevent growth funding and hide business problems",
        local_context={
            "local_context": "Most Ghana SMEs have inadequate financial systems",
            "market_reality": "Investors require professional financial statements"
        }
    ),
    Question(
        id="digital_payment_adoption",
        question="What percentage of customer payments do you receive through digital channels (Mobile Money, cards, bank transfers)?",
        type=QuestionType.PERCENTAGE,
        category=Category.GROWTH_READINESS,
        weight=0.08,
        validators=(PERCENTAGE_RANGE,),
        insight="Digital payment adoption is crucial for modern business growth",
        local_context={
            "local_context": "Ghana has high mobile money adoption rates",
            "market_reality": "Digital payments improve cash flow and reduce theft risk"
        }
    ),
    Question(
        id="inventory_management",
        question="How do you manage your inventory?",
        type=QuestionType.MULTIPLE,
        category=Category.OPERATIONAL_RESILIENCE,
        options=(
            _option("Digital system with real-time tracking", 100, "low", "digital_tracking"),
            _option("Regular manual counts and basic tracking", 70, "low", "manual_counts"),
            _option("Occasional counts, rough estimates", 40, "medium", "rough_estimates"),
            _option("No formal inventory management", 20, "high", "no_management"),
        ),
        weight=0.07,
        conditions=(
            DisplayCondition("business_type", ConditionOperator.CONTAINS, "Retail"),
        ),
        insight="Poor inventory management leads to stockouts and cash flow problems",
        local_context={
            "local_context": "Theft and spoilage are major issues in Ghana",
            "market_reality": "Inventory represents significant cash tied up in business"
        }
    ),
    Question(
        id="emergency_fund",
        question="Do you have emergency funds separate from working capital?",
        type=QuestionType.MULTIPLE,
        category=Category.FINANCIAL_HEALTH,
        options=(
            _option("Yes, 6+ months of expenses", 100, "low", "months_6_plus"),
            _option("Yes, 3-6 months of expenses", 80, "low", "months_3_6"),
            _option("Yes, 1-3 months of expenses", 60, "medium", "months_1_3"),
            _option("No emergency fund", 20, "high", "no_fund"),
        ),
        weight=0.09,
        insight="Emergency funds are your business survival insurance",
        local_context={
            "local_context": "Economic shocks are common in Ghana",
            "market_reality": "Businesses without emergency funds often collapse during crises"
        }
    ),
]

# Onboarding questions used to segment users; answered before the assessment
# and available to display conditions, but never scored.
ONBOARDING_QUESTIONS: List[Dict[str, Any]] = [
    {
        "id": "business_type",
        "question": "What type of business do you operate?",
        "type": "multiple",
        "options": [
            "Retail/Trading",
            "Manufacturing/Production",
            "Services/Consulting",
            "Agriculture/Farming",
            "Technology/Digital",
            "Food & Beverage",
            "Construction",
            "Transportation",
            "Other"
        ]
    },
    {
        "id": "years_in_business",
        "question": "How long have you been in business?",
        "type": "multiple",
        "options": [
            "Less than 1 year",
            "1-3 years",
            "3-5 years",
            "5-10 years",
            "More than 10 years"
        ]
    },
    {
        "id": "monthly_revenue",
        "question": "What is your average monthly revenue?",
        "type": "multiple",
        "options": [
            "Less than GHS 5,000",
            "GHS 5,000 - 20,000",
            "GHS 20,000 - 50,000",
            "GHS 50,000 - 100,000",
            "GHS 100,000 - 500,000",
            "More than GHS 500,000"
        ]
    },
    {
        "id": "location",
        "question": "Where is your business located?",
        "type": "multiple",
        "options": [
            "Greater Accra",
            "Ashanti Region",
            "Western Region",
            "Central Region",
            "Eastern Region",
            "Northern Region",
            "Upper East Region",
            "Upper West Region",
            "Volta Region",
            "Brong Ahafo Region"
        ]
    }
]

ONBOARDING_QUESTION_IDS = frozenset(q["id"] for q in ONBOARDING_QUESTIONS)


def get_question(question_id: str, questions: Optional[List[Question]] = None) -> Optional[Question]:
    """Get a question by ID"""
    for question in questions if questions is not None else ASSESSMENT_QUESTIONS:
        if question.id == question_id:
            return question
    return None


def get_questions_by_category(category_id: str, questions: Optional[List[Question]] = None) -> List[Question]:
    """Get all questions for a specific category"""
    source = questions if questions is not None else ASSESSMENT_QUESTIONS
    return [q for q in source if q.category.value == category_id]


def get_category_info(category_id: str) -> Dict[str, Any]:
    """Get category information"""
    return CATEGORIES.get(category_id, {})
