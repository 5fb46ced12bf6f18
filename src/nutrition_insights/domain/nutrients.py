"""Nutrient profile lookups with tolerant key matching."""

from collections.abc import Mapping

NutrientProfile = Mapping[str, float]

KCAL_PER_G_CARBS = 4.0
KCAL_PER_G_PROTEIN = 4.0
KCAL_PER_G_FAT = 9.0
KCAL_PER_G_ALCOHOL = 7.0

# Candidate keys per logical nutrient, in lookup priority order.
NUTRIENT_ALIASES: dict[str, tuple[str, ...]] = {
    "energy": ("ENERC_KCAL", "Energy", "kcal", "Calories"),
    "protein": ("PROCNT", "Protein", "protein_g"),
    "carbs": ("CHOCDF", "Carbohydrate", "Carbs", "carbs_g"),
    "fat": ("FAT", "Fat", "TotalFat", "fat_g"),
    "alcohol": ("ALC", "Alcohol", "alcohol_g"),
    "total_sugar": ("SUGAR", "Sugar", "Sugars", "sugar_g"),
    "added_sugar": ("SUGAR.added", "SUGAR_ADDED", "Sugar.added", "added_sugar_g"),
    "saturated_fat": ("FASAT", "FattyAcids,Saturated", "FAT_SAT", "saturated_fat_g"),
    "trans_fat": ("FATRN", "TransFattyAcids", "FAT_TRANS", "trans_fat_g"),
    "sodium": ("NA", "SODIUM", "Na", "sodium_mg"),
    "potassium": ("K", "POTASSIUM", "potassium_mg"),
    "fiber": ("FIBTG", "Fiber", "FIBER", "fiber_g"),
}


def pick(profile: NutrientProfile, *candidate_keys: str) -> float:
    """Return the first value found among the candidate keys, or 0.0.

    Each candidate is tried as an exact key, then case-insensitively, then with
    ``_`` and ``.`` treated as the same separator. A 0.0 result means "not
    reported" and must not be read as a measured zero.
    """
    for key in candidate_keys:
        if key in profile:
            return float(profile[key])
        lowered = key.lower()
        for profile_key, value in profile.items():
            if profile_key.lower() == lowered:
                return float(value)
        normalized = _normalize(key)
        for profile_key, value in profile.items():
            if _normalize(profile_key) == normalized:
                return float(value)
    return 0.0


def pick_nutrient(profile: NutrientProfile, nutrient: str) -> float:
    """Look up a logical nutrient through the alias table."""
    return pick(profile, *NUTRIENT_ALIASES[nutrient])


def macro_energy_kcal(carbs_g: float, protein_g: float, fat_g: float) -> float:
    """Energy from the three macronutrients only."""
    return (
        carbs_g * KCAL_PER_G_CARBS
        + protein_g * KCAL_PER_G_PROTEIN
        + fat_g * KCAL_PER_G_FAT
    )


def energy_kcal(profile: NutrientProfile) -> float:
    """Return reported energy, reconstructing it from macros when absent."""
    kcal = pick_nutrient(profile, "energy")
    if kcal > 0:
        return kcal
    return macro_energy_kcal(
        pick_nutrient(profile, "carbs"),
        pick_nutrient(profile, "protein"),
        pick_nutrient(profile, "fat"),
    ) + pick_nutrient(profile, "alcohol") * KCAL_PER_G_ALCOHOL


def _normalize(key: str) -> str:
    return key.replace("_", ".").lower()
