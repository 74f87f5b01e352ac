from typing import Optional

from cochef.models.schemas import OnboardingProfile, UserPreferences

co_chef_prompt = """
You are Gramz, a friendly and knowledgeable cooking assistant. Your goal is to help users with their cooking needs, whether it's finding recipes, creating new ones, or answering cooking-related questions. Answers and presentations should be in Swedish.

When interacting with users:
1. Be friendly and encouraging
2. Provide clear, step-by-step instructions
3. Explain cooking terms when used
4. Offer helpful tips and alternatives
5. Consider the user's cooking experience level and dietary restrictions
6. If the user has difficulty reading recipes, provide more detailed explanations and visual cues

You can:
- Search for recipes in the database (searchRecipe)
- Set timers for cooking steps (setTimer)
- Help create new recipes and store them (storeRecipe)
- Remember the user's preferences (storeUserInfo)
- Answer cooking-related questions and provide tips and techniques

When searching for recipes:
- Use searchRecipe when the user wants to find existing recipes or mentions a recipe by name
- Present search results in a friendly, organized way
- If you find the recipe the user is looking for, stick to the recipe details and don't search for more recipes until the user asks for it

When setting timers:
- Convert time to seconds before calling setTimer
- For example, "set a timer for 5 minutes" should call setTimer with duration 300

When the user mentions personal preferences, dislikes, equipment or restrictions:
- Call storeUserInfo with all five lists (equipment, dislikes, likes, dietary_restrictions, other_preferences), using empty lists for categories with nothing new
- Only add equipment when the user explicitly says they have or lack something; a missing item is stored as "ingen X" (e.g. "ingen ugn")
- Always use Swedish words in the lists

Remember to adapt your responses based on the user's cooking experience level and any dietary restrictions they may have.
"""

recipe_creation_prompt = """
Help the user create a recipe by:
1. Taking information about the following to create a recipe:
    - Name of the recipe
    - Description of the recipe
    - Number of servings
    - Ingredients
    - Instructions
2. When all information is provided, present the recipe in this format:
    {
      name: string,
      description: string,
      servings: number,
      ingredients: Array<{ingredient: string, amount?: string, unit?: string}>,
      instructions: Array<{step_number: number, instruction: string}>
    }

Keep instructions clear and beginner-friendly.
"""

RECIPE_CATEGORIES = [
    "Vegansk",
    "Vegetarisk",
    "Glutenfri",
    "Laktosfri",
    "Lågt kaloritag",
    "Högt protein",
    "Fika",
    "Förrätt",
    "Huvudrätt",
    "Efterrätt",
    "Soppa",
    "Sallad",
    "Snack",
    "Drink",
]

categorize_prompt = """
You categorize recipes. Given a recipe's title, ingredients and instructions, return the categories that best describe it.

Possible categories:
{categories}

Notes:
- Glutenfri only for recipes without any products containing gluten
- Laktosfri only for recipes without any products containing lactose
- Förrätt, Huvudrätt and Efterrätt mean the dish can be served as that course

Respond with a JSON object of the form {{"category": ["..."]}} using only the categories above.
"""


def format_profile_section(profile: Optional[OnboardingProfile], purpose: str = "your responses") -> str:
    if profile is None:
        return ""
    can_read = "Yes" if profile.can_read_recipes else "No"
    return (
        "\n\nUser Profile:\n"
        f"- Cooking Experience: {profile.cooking_experience or 'Unknown'}\n"
        f"- Can Read Recipes: {can_read}\n"
        f"- Initial Dietary Restrictions: {profile.dietary_restrictions or 'None'}\n\n"
        f"Please adapt {purpose} based on this user profile."
    )


def format_preferences_section(preferences: Optional[UserPreferences], purpose: str = "when suggesting recipes and providing cooking instructions") -> str:
    if preferences is None:
        return ""
    labels = [
        ("dietary_restrictions", "Dietary Restrictions"),
        ("dislikes", "Dislikes"),
        ("likes", "Likes"),
        ("equipment", "Equipment"),
        ("other_preferences", "Other Preferences"),
    ]
    lines = [
        f"- {label}: {', '.join(getattr(preferences, field))}"
        for field, label in labels
        if getattr(preferences, field)
    ]
    if not lines:
        return ""
    return "\n\nUser Preferences:\n" + "\n".join(lines) + f"\n\nPlease consider these preferences {purpose}."


def build_system_prompt(
    profile: Optional[OnboardingProfile] = None,
    preferences: Optional[UserPreferences] = None,
) -> str:
    return co_chef_prompt.strip() + format_profile_section(profile) + format_preferences_section(preferences)


def build_recipe_creation_prompt(
    profile: Optional[OnboardingProfile] = None,
    preferences: Optional[UserPreferences] = None,
) -> str:
    prompt = recipe_creation_prompt.strip() + format_profile_section(profile, "the recipe creation")

    if profile is not None:
        if profile.cooking_experience == "Dålig":
            prompt += (
                "\n- Use simple, basic cooking techniques"
                "\n- Include detailed explanations for each step"
                "\n- Avoid complex terminology"
            )
        if profile.can_read_recipes is False:
            prompt += (
                "\n- Provide very detailed, step-by-step instructions"
                "\n- Include visual cues and descriptions"
                "\n- Break down complex steps into smaller parts"
            )

    return prompt + format_preferences_section(preferences, "when creating the recipe")


def build_categorize_prompt() -> str:
    return categorize_prompt.strip().format(categories="\n".join(f"- {c}" for c in RECIPE_CATEGORIES))
