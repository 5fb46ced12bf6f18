"""Food safety evaluation against DGA 2020-2025 thresholds."""

import re
from dataclasses import dataclass

from nutrition_insights.domain.nutrients import (
    KCAL_PER_G_CARBS,
    KCAL_PER_G_FAT,
    KCAL_PER_G_PROTEIN,
    NutrientProfile,
    energy_kcal,
    macro_energy_kcal,
    pick_nutrient,
)
from nutrition_insights.domain.safety import (
    AssessmentContext,
    ItemAssessment,
    SafetyWarning,
    Severity,
)

DEFAULT_CALORIE_TARGET = 2000.0

ITEM_SHARE_LIMIT = 0.10
DAILY_SHARE_HIGH = 0.20
DAILY_SHARE_VERY_HIGH = 0.40
DAILY_KCAL_SHARE_CAP = 0.10

INFANT_AGE_LIMIT = 2
SSB_ADDED_SUGAR_G = 10.0
SSB_TOTAL_SUGAR_G = 15.0
SSB_MIN_KCAL = 50.0

SODIUM_DENSITY_MG_PER_100_KCAL = 400.0
SODIUM_POTASSIUM_RATIO = 1.5
TRANS_FAT_HIGH_G = 0.5

AMDR_RANGES = {
    "carbs": (45.0, 65.0),
    "protein": (10.0, 35.0),
    "fat": (20.0, 35.0),
}

FIBER_MIN_CARBS_G = 15.0
FIBER_LOW_PER_100_KCAL = 1.0
FIBER_GOOD_PER_100_KCAL = 2.5

ENERGY_DENSITY_HIGH = 150.0
ENERGY_DENSITY_VERY_HIGH = 275.0

SAT_FAT_SOURCE_TERMS = (
    "butter",
    "ghee",
    "cream",
    "cheese",
    "bacon",
    "sausage",
    "shortening",
    "palm oil",
    "palm kernel",
    "coconut oil",
    "lard",
)
WHOLE_GRAIN_TERMS = (
    "whole wheat",
    "whole-grain",
    "whole grain",
    "brown rice",
    "oat",
    "oats",
    "oatmeal",
    "quinoa",
    "bulgur",
    "rye",
    "wholemeal",
)
REFINED_GRAIN_TERMS = (
    "white bread",
    "white rice",
    "refined flour",
    "all-purpose flour",
    "maida",
    "cake",
    "pastry",
    "cracker",
    "biscuit",
)

# code -> (message template, DGA location)
_TEMPLATES: dict[str, tuple[str, str]] = {
    "added_sugars_infants": (
        "For children under 2 years, avoid added sugars ({value:.1f} g here).",
        "Ch.1, p.19 (limits)",
    ),
    "added_sugars_high_item": (
        "High added sugars for this item ({value:.0f}% of its calories).",
        "Ch.1, p.41-42 (limits)",
    ),
    "total_sugars_proxy_high": (
        "Likely high in added sugars (total sugars are {value:.0f}% of item "
        "calories; added sugars not reported).",
        "Ch.1, p.41-42 (limits)",
    ),
    "added_sugars_very_high_daily_share": (
        "Very high added sugars for one serving ({value:.0f}% of the daily limit).",
        "Ch.1, p.41-42 (limits)",
    ),
    "added_sugars_high_daily_share": (
        "High added sugars for one serving ({value:.0f}% of the daily limit).",
        "Ch.1, p.41-42 (limits)",
    ),
    "ssb_nudge": (
        "Sugar-sweetened beverages are a major source of added sugars; "
        "consider lower-sugar options.",
        "Ch.1, p.42 (sources/strategies)",
    ),
    "sat_fat_high_item": (
        "High saturated fat for this item ({value:.0f}% of its calories).",
        "Ch.1, p.44-46 (limit & swaps)",
    ),
    "sat_fat_very_high_daily_share": (
        "Very high saturated fat for one serving ({value:.0f}% of the daily limit).",
        "Ch.1, p.44-46 (limit & swaps)",
    ),
    "sat_fat_high_daily_share": (
        "High saturated fat for one serving ({value:.0f}% of the daily limit).",
        "Ch.1, p.44-46 (limit & swaps)",
    ),
    "satfat_source_heuristic": (
        "Saturated fat not reported, but this looks like a common saturated "
        "fat source; consider swaps.",
        "Ch.1, p.44-46 (limit & swaps)",
    ),
    "sodium_very_high": (
        "Very high sodium for one serving ({value:.0f}% of the daily limit).",
        "Ch.1, p.47 (CDRR)",
    ),
    "sodium_high": (
        "High sodium for one serving ({value:.0f}% of the daily limit).",
        "Ch.1, p.47 (CDRR) + Label 20% high",
    ),
    "sodium_dense": (
        "Sodium-dense item ({value:.0f} mg per 100 kcal).",
        "Ch.1, p.47 (CDRR)",
    ),
    "sodium_potassium_ratio_high": (
        "Sodium outweighs potassium (ratio {value:.2f}); "
        "pair with potassium-rich foods.",
        "Ch.1, p.47-48 (sodium, potassium)",
    ),
    "trans_fat_present": (
        "Contains trans fat ({value:.2f} g); keep intake as low as possible.",
        "Ch.1, p.45 (trans fat note)",
    ),
    "amdr_carbs_out_of_range": (
        "Carbohydrates are {value:.0f}% of this item's macro calories "
        "(AMDR bound {limit:.0f}%).",
        "Appendix 1 (AMDR)",
    ),
    "amdr_protein_out_of_range": (
        "Protein is {value:.0f}% of this item's macro calories "
        "(AMDR bound {limit:.0f}%).",
        "Appendix 1 (AMDR)",
    ),
    "amdr_fat_out_of_range": (
        "Fat is {value:.0f}% of this item's macro calories "
        "(AMDR bound {limit:.0f}%).",
        "Appendix 1 (AMDR)",
    ),
    "fiber_low": (
        "Low fiber for its carbohydrates ({value:.1f} g per 100 kcal); "
        "consider a higher-fiber swap.",
        "Ch.1, p.33 (dietary fiber)",
    ),
    "fiber_good": (
        "Good source of fiber ({value:.1f} g per 100 kcal).",
        "Ch.1, p.33 (dietary fiber)",
    ),
    "whole_grain_positive": (
        "Whole-grain choice; at least half of grains should be whole grains.",
        "Ch.1, p.33 (grains)",
    ),
    "refined_grain_nudge": (
        "Refined grain product; consider a whole-grain alternative.",
        "Ch.1, p.33 (grains)",
    ),
    "energy_density_very_high": (
        "Very energy-dense item ({value:.0f} kcal per 100 g).",
        "Ch.1, p.31 (nutrient-dense choices)",
    ),
    "energy_density_high": (
        "Energy-dense item ({value:.0f} kcal per 100 g).",
        "Ch.1, p.31 (nutrient-dense choices)",
    ),
}


@dataclass(frozen=True)
class _Intake:
    kcal: float
    added_sugar_g: float
    total_sugar_g: float
    sat_fat_g: float
    trans_fat_g: float
    sodium_mg: float
    potassium_mg: float
    carbs_g: float
    protein_g: float
    fat_g: float
    fiber_g: float

    @classmethod
    def from_profile(cls, profile: NutrientProfile) -> "_Intake":
        return cls(
            kcal=energy_kcal(profile),
            added_sugar_g=pick_nutrient(profile, "added_sugar"),
            total_sugar_g=pick_nutrient(profile, "total_sugar"),
            sat_fat_g=pick_nutrient(profile, "saturated_fat"),
            trans_fat_g=pick_nutrient(profile, "trans_fat"),
            sodium_mg=pick_nutrient(profile, "sodium"),
            potassium_mg=pick_nutrient(profile, "potassium"),
            carbs_g=pick_nutrient(profile, "carbs"),
            protein_g=pick_nutrient(profile, "protein"),
            fat_g=pick_nutrient(profile, "fat"),
            fiber_g=pick_nutrient(profile, "fiber"),
        )


@dataclass
class FoodSafetyEvaluator:
    """Rule-based evaluator for a single consumed food item.

    Rules run in a fixed order, so the warning list is deterministic for a
    given profile and context. Informational warnings never make an item
    unsafe.
    """

    default_calorie_target: float = DEFAULT_CALORIE_TARGET

    def evaluate(
        self, profile: NutrientProfile, context: AssessmentContext | None = None
    ) -> list[SafetyWarning]:
        """Return ordered warnings for one item."""
        ctx = context or AssessmentContext()
        intake = _Intake.from_profile(profile)
        calorie_target = (
            ctx.calorie_target
            if ctx.calorie_target > 0
            else self.default_calorie_target
        )
        label = ctx.item_label.lower()

        warnings: list[SafetyWarning] = []
        warnings.extend(_added_sugar_rules(intake, ctx, calorie_target))
        warnings.extend(_saturated_fat_rules(intake, label, calorie_target))
        warnings.extend(_sodium_rules(intake, ctx.age_years))
        warnings.extend(_trans_fat_rules(intake))
        warnings.extend(_macro_distribution_rules(intake))
        warnings.extend(_fiber_rules(intake))
        warnings.extend(_grain_rules(label))
        warnings.extend(_energy_density_rules(intake, ctx.serving_grams))
        return warnings

    def assess(
        self, profile: NutrientProfile, context: AssessmentContext | None = None
    ) -> ItemAssessment:
        """Evaluate an item and wrap the result with its safe verdict."""
        return ItemAssessment(warnings=self.evaluate(profile, context))


def sodium_limit_mg(age_years: int) -> float:
    """CDRR sodium limit per day by age; unknown age uses the adult limit."""
    if 0 < age_years <= 3:  # noqa: PLR2004
        return 1200.0
    if 4 <= age_years <= 8:  # noqa: PLR2004
        return 1500.0
    if 9 <= age_years <= 13:  # noqa: PLR2004
        return 1800.0
    return 2300.0


def daily_limit_g(calorie_target: float, kcal_per_g: float) -> float:
    """Grams per day that make up 10% of the calorie target."""
    return DAILY_KCAL_SHARE_CAP * calorie_target / kcal_per_g


def _added_sugar_rules(
    intake: _Intake, ctx: AssessmentContext, calorie_target: float
) -> list[SafetyWarning]:
    if 0 < ctx.age_years < INFANT_AGE_LIMIT:
        if intake.added_sugar_g > 0:
            return [
                _warning(
                    "added_sugars_infants",
                    Severity.HIGH,
                    metric="added_sugar_g",
                    value=intake.added_sugar_g,
                )
            ]
        return []

    warnings: list[SafetyWarning] = []
    if intake.kcal > 0:
        if intake.added_sugar_g > 0:
            share = intake.added_sugar_g * KCAL_PER_G_CARBS / intake.kcal
            if share >= ITEM_SHARE_LIMIT:
                warnings.append(
                    _item_share_warning(
                        "added_sugars_high_item",
                        Severity.HIGH,
                        "added_sugar_%_of_item_kcal",
                        share,
                    )
                )
        elif intake.total_sugar_g > 0:
            share = intake.total_sugar_g * KCAL_PER_G_CARBS / intake.kcal
            if share >= ITEM_SHARE_LIMIT:
                warnings.append(
                    _item_share_warning(
                        "total_sugars_proxy_high",
                        Severity.CAUTION,
                        "total_sugar_%_of_item_kcal",
                        share,
                    )
                )

    if intake.added_sugar_g > 0:
        limit = daily_limit_g(calorie_target, KCAL_PER_G_CARBS)
        warning = _daily_share_warning(
            "added_sugars", "added_sugar", intake.added_sugar_g / limit
        )
        if warning:
            warnings.append(warning)

    if (
        ctx.is_beverage
        and (
            intake.added_sugar_g >= SSB_ADDED_SUGAR_G
            or intake.total_sugar_g >= SSB_TOTAL_SUGAR_G
        )
        and intake.kcal >= SSB_MIN_KCAL
    ):
        warnings.append(_warning("ssb_nudge", Severity.INFO))
    return warnings


def _saturated_fat_rules(
    intake: _Intake, label: str, calorie_target: float
) -> list[SafetyWarning]:
    if intake.sat_fat_g <= 0:
        if _contains_any(label, SAT_FAT_SOURCE_TERMS):
            return [_warning("satfat_source_heuristic", Severity.INFO)]
        return []

    warnings: list[SafetyWarning] = []
    if intake.kcal > 0:
        share = intake.sat_fat_g * KCAL_PER_G_FAT / intake.kcal
        if share >= ITEM_SHARE_LIMIT:
            warnings.append(
                _item_share_warning(
                    "sat_fat_high_item",
                    Severity.HIGH,
                    "saturated_fat_%_of_item_kcal",
                    share,
                )
            )
    limit = daily_limit_g(calorie_target, KCAL_PER_G_FAT)
    warning = _daily_share_warning("sat_fat", "saturated_fat", intake.sat_fat_g / limit)
    if warning:
        warnings.append(warning)
    return warnings


def _sodium_rules(intake: _Intake, age_years: int) -> list[SafetyWarning]:
    if intake.sodium_mg <= 0:
        return []
    warnings: list[SafetyWarning] = []
    share = intake.sodium_mg / sodium_limit_mg(age_years)
    code = None
    severity = Severity.CAUTION
    if share >= DAILY_SHARE_VERY_HIGH:
        code, severity = "sodium_very_high", Severity.HIGH
    elif share >= DAILY_SHARE_HIGH:
        code = "sodium_high"
    if code:
        warnings.append(
            _warning(
                code,
                severity,
                metric="sodium_%_of_daily_limit_per_serving",
                value=share * 100,
                limit=100,
                percent_of_limit=share * 100,
            )
        )

    if intake.kcal > 0:
        density = intake.sodium_mg / intake.kcal * 100
        if density >= SODIUM_DENSITY_MG_PER_100_KCAL:
            warnings.append(
                _warning(
                    "sodium_dense",
                    Severity.INFO,
                    metric="sodium_mg_per_100_kcal",
                    value=density,
                    limit=SODIUM_DENSITY_MG_PER_100_KCAL,
                    percent_of_limit=density / SODIUM_DENSITY_MG_PER_100_KCAL * 100,
                )
            )

    if intake.potassium_mg > 0:
        ratio = intake.sodium_mg / intake.potassium_mg
        if ratio > SODIUM_POTASSIUM_RATIO:
            warnings.append(
                _warning(
                    "sodium_potassium_ratio_high",
                    Severity.INFO,
                    metric="sodium_to_potassium_ratio",
                    value=ratio,
                    limit=SODIUM_POTASSIUM_RATIO,
                )
            )
    return warnings


def _trans_fat_rules(intake: _Intake) -> list[SafetyWarning]:
    if intake.trans_fat_g <= 0:
        return []
    severity = (
        Severity.HIGH if intake.trans_fat_g >= TRANS_FAT_HIGH_G else Severity.CAUTION
    )
    return [
        _warning(
            "trans_fat_present",
            severity,
            metric="trans_fat_g",
            value=intake.trans_fat_g,
        )
    ]


def _macro_distribution_rules(intake: _Intake) -> list[SafetyWarning]:
    if intake.carbs_g <= 0 and intake.protein_g <= 0 and intake.fat_g <= 0:
        return []
    total = macro_energy_kcal(intake.carbs_g, intake.protein_g, intake.fat_g)
    if total <= 0:
        return []
    shares = {
        "carbs": intake.carbs_g * KCAL_PER_G_CARBS / total * 100,
        "protein": intake.protein_g * KCAL_PER_G_PROTEIN / total * 100,
        "fat": intake.fat_g * KCAL_PER_G_FAT / total * 100,
    }
    warnings: list[SafetyWarning] = []
    for macro, (low, high) in AMDR_RANGES.items():
        share = shares[macro]
        if low <= share <= high:
            continue
        warnings.append(
            _warning(
                f"amdr_{macro}_out_of_range",
                Severity.INFO,
                metric=f"{macro}_%_of_macro_kcal",
                value=share,
                limit=low if share < low else high,
            )
        )
    return warnings


def _fiber_rules(intake: _Intake) -> list[SafetyWarning]:
    if intake.carbs_g < FIBER_MIN_CARBS_G or intake.fiber_g <= 0 or intake.kcal <= 0:
        return []
    per_100_kcal = intake.fiber_g / intake.kcal * 100
    if per_100_kcal < FIBER_LOW_PER_100_KCAL:
        code, limit = "fiber_low", FIBER_LOW_PER_100_KCAL
    elif per_100_kcal >= FIBER_GOOD_PER_100_KCAL:
        code, limit = "fiber_good", FIBER_GOOD_PER_100_KCAL
    else:
        return []
    return [
        _warning(
            code,
            Severity.INFO,
            metric="fiber_g_per_100_kcal",
            value=per_100_kcal,
            limit=limit,
        )
    ]


def _grain_rules(label: str) -> list[SafetyWarning]:
    if not label:
        return []
    if _contains_word(label, WHOLE_GRAIN_TERMS):
        return [_warning("whole_grain_positive", Severity.INFO)]
    if _contains_any(label, REFINED_GRAIN_TERMS):
        return [_warning("refined_grain_nudge", Severity.INFO)]
    return []


def _energy_density_rules(intake: _Intake, serving_grams: float) -> list[SafetyWarning]:
    if serving_grams <= 0 or intake.kcal <= 0:
        return []
    per_100g = intake.kcal / serving_grams * 100
    if per_100g >= ENERGY_DENSITY_VERY_HIGH:
        code, limit = "energy_density_very_high", ENERGY_DENSITY_VERY_HIGH
    elif per_100g >= ENERGY_DENSITY_HIGH:
        code, limit = "energy_density_high", ENERGY_DENSITY_HIGH
    else:
        return []
    return [
        _warning(
            code,
            Severity.INFO,
            metric="kcal_per_100g",
            value=per_100g,
            limit=limit,
        )
    ]


def _item_share_warning(
    code: str, severity: Severity, metric: str, share: float
) -> SafetyWarning:
    return _warning(
        code,
        severity,
        metric=metric,
        value=share * 100,
        limit=ITEM_SHARE_LIMIT * 100,
        percent_of_limit=share / ITEM_SHARE_LIMIT * 100,
    )


def _daily_share_warning(
    prefix: str, metric_name: str, share: float
) -> SafetyWarning | None:
    if share >= DAILY_SHARE_VERY_HIGH:
        code, severity = f"{prefix}_very_high_daily_share", Severity.HIGH
    elif share >= DAILY_SHARE_HIGH:
        code, severity = f"{prefix}_high_daily_share", Severity.CAUTION
    else:
        return None
    return _warning(
        code,
        severity,
        metric=f"{metric_name}_%_of_daily_limit_per_serving",
        value=share * 100,
        limit=100,
        percent_of_limit=share * 100,
    )


def _warning(  # noqa: PLR0913
    code: str,
    severity: Severity,
    *,
    metric: str = "",
    value: float = 0.0,
    limit: float = 0.0,
    percent_of_limit: float = 0.0,
) -> SafetyWarning:
    template, location = _TEMPLATES[code]
    value = round(value, 2)
    limit = round(limit, 2)
    return SafetyWarning(
        code=code,
        severity=severity,
        message=template.format(value=value, limit=limit),
        metric=metric,
        value=value,
        limit=limit,
        percent_of_limit=round(percent_of_limit, 2),
        reference=f"Dietary Guidelines for Americans, 2020-2025: {location}",
    )


def _contains_any(text: str, terms: tuple[str, ...]) -> bool:
    return any(term in text for term in terms)


def _contains_word(text: str, terms: tuple[str, ...]) -> bool:
    return any(re.search(rf"\b{re.escape(term)}\b", text) for term in terms)

