"""Static health-science knowledge base: citations and protocols by topic.

Read-only lookup tables.  Dashboard assembly and the insight summarizer take
a :class:`KnowledgeBase` argument (``DEFAULT_KNOWLEDGE`` unless told
otherwise) instead of reaching for module globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class ScientificReference:
    finding: str
    source: str
    year: int
    application: str


@dataclass(frozen=True)
class HealthProtocol:
    name: str
    description: str
    evidence: str
    implementation: tuple[str, ...]
    expected_outcome: str


# ---------------------------------------------------------------------------
# Findings
# ---------------------------------------------------------------------------

SLEEP_SCIENCE: tuple[ScientificReference, ...] = (
    ScientificReference(
        "Adults need 7-9 hours of sleep for optimal health and cognitive function",
        "National Sleep Foundation Guidelines (Watson et al., 2015)",
        2015,
        "Target 7.5-8 hours of sleep for most adults; individual needs vary",
    ),
    ScientificReference(
        "Deep sleep (SWS) is critical for physical recovery and immune function, peaks in first sleep cycles",
        "Besedovsky et al., PSIM, 2019",
        2019,
        "First 3-4 hours of sleep are most important for recovery; prioritize consistent sleep timing",
    ),
    ScientificReference(
        "REM sleep consolidates learning and emotional regulation, increases toward morning",
        "Walker, Nature Reviews Neuroscience, 2009",
        2009,
        "Full sleep duration needed for adequate REM; cutting sleep short reduces REM disproportionately",
    ),
    ScientificReference(
        "Sleep consistency (same bedtime/wake time) improves sleep quality more than duration alone",
        "Phillips et al., Scientific Reports, 2017",
        2017,
        "Maintain consistent sleep schedule within 30-60 minutes, even on weekends",
    ),
    ScientificReference(
        "Core body temperature drop of 1-2°C is necessary for sleep initiation and quality",
        "Okamoto-Mizuno & Mizuno, Journal of Physiological Anthropology, 2012",
        2012,
        "Cool bedroom (15-19°C/60-67°F), warm bath 1-2 hours before bed paradoxically helps cooling",
    ),
    ScientificReference(
        "Sleep latency >30 minutes or efficiency <85% indicates sleep disorder risk",
        "American Academy of Sleep Medicine, 2014",
        2014,
        "If consistently seeing these patterns, consider sleep hygiene improvements or medical consultation",
    ),
)

HRV_SCIENCE: tuple[ScientificReference, ...] = (
    ScientificReference(
        "Higher HRV indicates better autonomic nervous system flexibility and recovery capacity",
        "Shaffer & Ginsberg, Frontiers in Public Health, 2017",
        2017,
        "Track HRV trends rather than absolute values; rising HRV = improving recovery",
    ),
    ScientificReference(
        "HRV decreases with overtraining, insufficient recovery, and chronic stress",
        "Plews et al., Sports Medicine, 2013",
        2013,
        "Consistent HRV decline suggests need for rest; training load reduction recommended",
    ),
    ScientificReference(
        "HRV-guided training improves performance vs. fixed training plans",
        "Kiviniemi et al., Medicine & Science in Sports & Exercise, 2007",
        2007,
        "On low HRV days: reduce intensity, focus on recovery; high HRV days: train hard",
    ),
    ScientificReference(
        "Alcohol reduces HRV for 12-24 hours, disrupting recovery",
        "Stein & Pu, Alcohol, 2012",
        2012,
        "Avoid alcohol 3+ hours before sleep; expect reduced recovery scores after consumption",
    ),
)

ACTIVITY_SCIENCE: tuple[ScientificReference, ...] = (
    ScientificReference(
        "7,000-10,000 steps/day associated with significant mortality reduction",
        "Paluch et al., JAMA, 2022",
        2022,
        "Aim for minimum 7,000 steps daily; benefits plateau around 10,000 for most people",
    ),
    ScientificReference(
        "Breaking up sedentary time every 30 minutes improves metabolic health",
        "Dunstan et al., Diabetes Care, 2012",
        2012,
        "Set hourly movement reminders; 2-5 minute walking breaks are sufficient",
    ),
    ScientificReference(
        "Polarized training (80% easy, 20% hard) superior to threshold training for endurance",
        "Seiler & Kjerland, Journal of Sports Sciences, 2006",
        2006,
        "Most training should feel easy; reserve 1-2 sessions/week for high intensity",
    ),
    ScientificReference(
        "1.5-2 days recovery needed between hard training sessions for adaptation",
        "Hausswirth & Le Meur, Sports Medicine, 2011",
        2011,
        "Don't train hard on consecutive days; monitor readiness scores for recovery confirmation",
    ),
    ScientificReference(
        "Zone 2 training (conversational pace) optimizes mitochondrial adaptation",
        "San-Millán & Brooks, Cell Metabolism, 2018",
        2018,
        "Include 2-4 hours/week of easy aerobic exercise for metabolic health",
    ),
)

STRESS_SCIENCE: tuple[ScientificReference, ...] = (
    ScientificReference(
        "Chronic stress elevates cortisol, suppresses immune function, disrupts sleep",
        "Mariotti, Neuroimmunomodulation, 2015",
        2015,
        "Implement daily stress reduction: meditation, breathing exercises, or nature exposure",
    ),
    ScientificReference(
        "Mindfulness meditation increases HRV and reduces perceived stress",
        "Brewer et al., PLOS ONE, 2009",
        2009,
        "10-20 minutes daily meditation shown effective; consistency matters more than duration",
    ),
    ScientificReference(
        "Box breathing (4-4-4-4) activates parasympathetic nervous system",
        "Russo et al., Breathe, 2017",
        2017,
        "Practice 5 minutes of box breathing when stressed or before bed",
    ),
    ScientificReference(
        "Nature exposure reduces cortisol and improves mood markers",
        "Hunter et al., Frontiers in Psychology, 2019",
        2019,
        "20-30 minutes in nature 3x/week; even urban parks show benefits",
    ),
)


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------

SLEEP_PROTOCOL = "Sleep Optimization Protocol"
HRV_PROTOCOL = "HRV Optimization Protocol"
RECOVERY_PROTOCOL = "Athletic Recovery Protocol"
STRESS_PROTOCOL = "Stress Reduction Protocol"
METABOLIC_PROTOCOL = "Metabolic Health Protocol"

HEALTH_PROTOCOLS: Mapping[str, HealthProtocol] = MappingProxyType({
    "sleep_optimization": HealthProtocol(
        name=SLEEP_PROTOCOL,
        description="Evidence-based protocol for improving sleep quality and duration",
        evidence="Combined protocols from Walker (2017), Huberman Lab, and NSF guidelines",
        implementation=(
            "Consistent sleep schedule: Same bedtime ±30 min, even weekends",
            "Morning sunlight: 10-30 min within 1 hour of waking",
            "Cool bedroom: 15-19°C (60-67°F) optimal for sleep",
            "Avoid caffeine 10+ hours before bed (half-life: 5-6 hours)",
            "No alcohol 3+ hours before bed (disrupts REM and HRV)",
            "Dim lights 2-3 hours before bed; use red/amber lighting",
            "Hot bath/shower 1-2 hours before bed (helps core temperature drop)",
            "No food 2-3 hours before bed for better sleep quality",
            "Wind-down routine: 30-60 min relaxing activity before bed",
        ),
        expected_outcome="2-4 week implementation typically improves sleep efficiency 5-15%, increases deep sleep 10-20%",
    ),
    "hrv_optimization": HealthProtocol(
        name=HRV_PROTOCOL,
        description="Protocol to increase heart rate variability and recovery capacity",
        evidence="Based on Shaffer & Ginsberg (2017), Kiviniemi et al. (2007)",
        implementation=(
            "Prioritize sleep quality and duration (7-9 hours)",
            "Practice daily breathing exercises: Box breathing or resonance frequency breathing (5.5 breaths/min)",
            "Avoid overtraining: Monitor HRV trends, reduce load on declining HRV",
            "Manage alcohol: Limit consumption, avoid within 3 hours of sleep",
            "Cold exposure: Cold showers or ice baths 2-3x/week",
            "Meditation: 10-20 min daily mindfulness practice",
            "Consistent exercise: Moderate intensity most days, periodic high intensity",
            "Stress management: Identify and reduce chronic stressors",
        ),
        expected_outcome="3-6 months consistent practice can increase resting HRV 10-30%",
    ),
    "recovery_optimization": HealthProtocol(
        name=RECOVERY_PROTOCOL,
        description="Evidence-based recovery optimization for training athletes",
        evidence="Hausswirth & Le Meur (2011), Halson (2014) - Sports Medicine",
        implementation=(
            "Sleep 8-10 hours during heavy training blocks",
            "Active recovery: Light movement (30-60% max HR) on rest days",
            "Nutrition timing: Protein + carbs within 30-60 min post-workout",
            "Hydration: Monitor urine color; aim for pale yellow",
            "Compression: Use compression garments 2-4 hours post-training",
            "Contrast therapy: Hot/cold exposure alternating (evidence mixed but widely used)",
            "Massage/foam rolling: 10-15 min daily for muscle soreness",
            "Monitor readiness: Track HRV, resting HR, sleep quality, mood",
            "Deload weeks: Reduce volume 40-60% every 3-4 weeks",
        ),
        expected_outcome="Proper recovery enables 15-20% higher training loads without overtraining symptoms",
    ),
    "stress_reduction": HealthProtocol(
        name=STRESS_PROTOCOL,
        description="Evidence-based protocol for managing chronic stress",
        evidence="Mariotti (2015), Brewer et al. (2009), Hunter et al. (2019)",
        implementation=(
            "Daily mindfulness: 10-20 min meditation",
            "Breathing practice: 5 min box breathing (4-4-4-4) 2-3x daily",
            "Nature exposure: 20-30 min in green space 3x/week minimum",
            "Exercise: Moderate intensity 30+ min most days (anxiety reduction)",
            "Social connection: Meaningful interactions with friends/family",
            "Sleep prioritization: 7-9 hours; stress disrupts sleep, poor sleep increases stress",
            "Limit stimulants: Reduce caffeine if anxious; no caffeine after 2pm",
            "Digital detox: Evening device-free time; limit news/social media",
            "Journaling: 10 min before bed to process thoughts",
        ),
        expected_outcome="4-8 weeks shows measurable cortisol reduction, improved HRV, better sleep quality",
    ),
    "metabolic_health": HealthProtocol(
        name=METABOLIC_PROTOCOL,
        description="Optimize metabolic fitness and longevity markers",
        evidence="San-Millán & Brooks (2018), Paluch et al. (2022)",
        implementation=(
            "Zone 2 training: 2-4 hours/week conversational pace cardio",
            "Daily steps: Minimum 7,000, target 10,000 steps",
            "Break up sitting: 2-5 min movement every 30-60 minutes",
            "Resistance training: 2-3x/week full body strength work",
            "Time-restricted eating: 12-14 hour overnight fast",
            "Protein intake: 1.6-2.2g/kg bodyweight for muscle preservation",
            "Fiber intake: 25-35g daily for gut health and metabolic function",
            "Sleep: 7-9 hours (sleep deprivation increases insulin resistance)",
            "Stress management: Chronic stress impairs metabolic health",
        ),
        expected_outcome="3-6 months improves insulin sensitivity, VO2 max, body composition, and longevity markers",
    ),
})


# ---------------------------------------------------------------------------
# Interpretation bands: (lower bound, text), checked top-down
# ---------------------------------------------------------------------------

_BANDS: Mapping[str, tuple[tuple[float, str], ...]] = MappingProxyType({
    "sleep_score": (
        (85, "Excellent - Optimal sleep quality for recovery and performance"),
        (70, "Good - Adequate sleep, minor optimizations could help"),
        (55, "Fair - Sleep quality impacting recovery; protocol changes recommended"),
        (float("-inf"), "Poor - Significant sleep issues; consider sleep specialist consultation"),
    ),
    "readiness_score": (
        (85, "Excellent - Body is well-recovered and ready for high performance"),
        (70, "Good - Ready for moderate training; may benefit from lighter day"),
        (55, "Fair - Recovery incomplete; reduce training intensity today"),
        (float("-inf"), "Poor - Significant recovery debt; rest day strongly recommended"),
    ),
    "steps": (
        (10000, "Excellent - Meeting optimal daily movement targets"),
        (7000, "Good - Meeting minimum health benefit threshold (Paluch et al., 2022)"),
        (5000, "Fair - Below optimal; aim to increase by 1000-2000 steps"),
        (float("-inf"), "Low - Significantly below recommended; prioritize increasing daily movement"),
    ),
})


@dataclass(frozen=True)
class KnowledgeBase:
    """Read-only view over the topic findings and protocols."""

    topics: Mapping[str, tuple[ScientificReference, ...]] = field(
        default_factory=lambda: MappingProxyType({
            "sleep": SLEEP_SCIENCE,
            "hrv": HRV_SCIENCE,
            "activity": ACTIVITY_SCIENCE,
            "stress": STRESS_SCIENCE,
        })
    )
    protocols: Mapping[str, HealthProtocol] = field(default_factory=lambda: HEALTH_PROTOCOLS)

    def science(self, topic: str) -> tuple[ScientificReference, ...]:
        """Findings for *topic* (case-insensitive); unknown topics are empty."""
        return self.topics.get(topic.lower(), ())

    def findings(self, topic: str, start: int = 0, stop: int | None = None) -> list[str]:
        """Just the finding strings of ``science(topic)[start:stop]``."""
        return [ref.finding for ref in self.science(topic)[start:stop]]

    def protocol(self, name: str) -> HealthProtocol | None:
        """Look a protocol up by id or by display name."""
        if name in self.protocols:
            return self.protocols[name]
        for proto in self.protocols.values():
            if proto.name == name:
                return proto
        return None

    def recommended_protocols(
        self,
        sleep_avg: float,
        avg_steps: float,
        well_rested_days: int,
        days_analyzed: int,
        stressed_days: int,
        restored_days: int,
        hrv_balance: float | None = None,
    ) -> list[HealthProtocol]:
        """Protocols whose trigger condition the summary meets, in table order."""
        picked: list[HealthProtocol] = []
        if sleep_avg < 75:
            picked.append(self.protocols["sleep_optimization"])
        if hrv_balance is not None and hrv_balance < 70:
            picked.append(self.protocols["hrv_optimization"])
        if days_analyzed > 0 and well_rested_days / days_analyzed < 0.5:
            picked.append(self.protocols["recovery_optimization"])
        if stressed_days > restored_days:
            picked.append(self.protocols["stress_reduction"])
        if avg_steps < 7000:
            picked.append(self.protocols["metabolic_health"])
        return picked

    def interpret(self, value: float, metric: str) -> str:
        """Banded text for *value*; empty string for metrics without bands."""
        for lower, text in _BANDS.get(metric, ()):
            if value >= lower:
                return text
        return ""


DEFAULT_KNOWLEDGE = KnowledgeBase()
