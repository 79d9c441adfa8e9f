from __future__ import annotations

from tripfit.services.llm.types import OutfitRecommendation
from tripfit.services.weather import WeatherSnapshot


PROMPT_VERSION = "p1"

RECOMMENDATION_SYS = (
    "You are a fashion expert specializing in global and regional fashion trends, "
    "cultural dressing norms, and traditional attire. You answer with JSON only."
)

RECOMMENDATION_TEMPLATE = """Given the following information, recommend an outfit in JSON format:

Weather: {weather}
Occasion: {occasion}
Style/Vibe: {vibe}
Body Type: {body_type}
Gender: {gender}
Location: {destination}

CRITICAL RULES:
1. Consider the current fashion trends, common dressing styles, and cultural nuances of the specific LOCATION provided.
2. For formal occasions (weddings, religious ceremonies), recommend traditional or formal attire that is appropriate and common for the LOCATION's culture.
3. For casual occasions, suggest attire that suits the weather and is common for casual wear in the LOCATION.
4. Align the outfit with the requested Style/Vibe while respecting local norms.
5. ALWAYS include accessories and footwear suitable for the outfit, occasion, weather, and location.

IMPORTANT: You must respond with ONLY a valid JSON object in this exact format:
{{
  "top": "3-4 word description of the top",
  "bottom": "3-4 word description of the bottom",
  "shoes": "3-4 word description of the shoes",
  "accessories": ["3-4 word accessory 1", "3-4 word accessory 2"],
  "outerwear": "3-4 word description of outerwear (if needed)",
  "topColor": "color of the top",
  "bottomColor": "color of the bottom",
  "shoesColor": "color of the shoes",
  "accessoriesColor": "color of the accessories",
  "outerwearColor": "color of the outerwear (if applicable)",
  "culturalNotes": "Brief cultural note about local dress customs and considerations for the LOCATION (max 30 words)"
}}

Rules:
1. Only return the JSON object, no other text.
2. Make sure the JSON is valid and properly formatted.
3. Provide concise, 3-4 word descriptions for each item.
4. Consider the weather conditions and occasion.
5. Include at least 2 accessories.
6. Include outerwear only if the weather suggests it's needed.
7. Always fill in every color field.
8. Do not include any extra text or formatting outside the JSON object.
9. The outfit MUST be appropriate for the specific LOCATION and its cultural context."""

IMAGE_TEMPLATE = """Generate a realistic image of a person wearing the following outfit. Focus on the visual details of the clothing items and the overall style. Keep the background simple and neutral.

Outfit Description:
{lines}

Style: {vibe}
Occasion: {occasion}
Weather: Temperature {temperature}°C, {condition}

The image should be clear, well-lit, and show the outfit details accurately."""


def build_recommendation_prompt(
    weather: WeatherSnapshot,
    occasion: str,
    vibe: str,
    body_type: str,
    gender: str,
    destination: str,
) -> str:
    return RECOMMENDATION_TEMPLATE.format(
        weather=weather.to_prompt_line(),
        occasion=occasion,
        vibe=vibe,
        body_type=body_type,
        gender=gender,
        destination=destination,
    )


def _with_color(desc: str, color: str) -> str:
    return f"{desc} ({color})" if color else desc


def build_image_prompt(
    outfit: OutfitRecommendation,
    occasion: str,
    vibe: str,
    weather: WeatherSnapshot,
) -> str:
    lines = [
        f"Top: {_with_color(outfit.top, outfit.top_color)}",
        f"Bottom: {_with_color(outfit.bottom, outfit.bottom_color)}",
        f"Shoes: {_with_color(outfit.shoes, outfit.shoes_color)}",
    ]
    if outfit.accessories:
        lines.append(f"Accessories: {_with_color(', '.join(outfit.accessories), outfit.accessories_color)}")
    if outfit.outerwear:
        lines.append(f"Outerwear: {_with_color(outfit.outerwear, outfit.outerwear_color)}")
    return IMAGE_TEMPLATE.format(
        lines="\n".join(lines),
        vibe=vibe,
        occasion=occasion,
        temperature=f"{weather.temperature:g}",
        condition=weather.description,
    )
