"""Prompt templates and canned reply texts"""

SYSTEM_PROMPT = """You are an advanced AI shopping assistant with the following capabilities:

CORE RESPONSIBILITIES:
- Product recommendations with detailed specifications
- Visual product search and similarity matching
- Purchase intent prediction and proactive assistance
- Order tracking and customer service
- Price comparison and deal alerts

TONE & STYLE:
- Friendly, professional, and conversational
- Use emojis occasionally (🔹 for product bullets)
- Be concise but informative
- Always prioritize customer safety and satisfaction

UNIQUE CAPABILITIES:
1. Visual Search: Analyze product images to find similar items
2. Intent Prediction: Identify when users are ready to purchase
3. Smart Recommendations: Consider budget, preferences, and past behavior
4. Proactive Assistance: Offer help before being asked

Always maintain high accuracy, appropriate tone, and safety in responses."""

VISUAL_SEARCH_TEMPLATE = """[VISUAL SEARCH REQUEST] The user uploaded an image and asked: "{message}".
Analyze the image and provide 3-5 similar product recommendations with:
- Product name and price
- Visual similarity percentage (80-95%)
- Key features that match
- Why it's a good alternative"""

USER_TURN_TEMPLATE = (
    "Customer Question: {message}\n\n"
    "Please provide a helpful response as a shopping assistant."
)

FALLBACK_REPLY = (
    "I'm here to help! You can ask me about our products, pricing, shipping, returns, "
    "warranties, or upload an image to find similar products!"
)

ERROR_REPLY = (
    "I apologize, but I'm having trouble connecting to my AI service right now. "
    "You can ask me about shipping, returns, warranties, or product recommendations, "
    "and I'll do my best to help!"
)

# Used by the HTTP layer when something outside the orchestrator fails
BOUNDARY_FALLBACK_REPLY = (
    "I'm here to help with your shopping questions! "
    "Please ask me about products, pricing, shipping, or returns."
)

INTERNAL_ERROR_REPLY = "Something went wrong. Please try again."


def build_oracle_prompt(message: str, has_image: bool) -> str:
    # Image uploads are always turned into a visual search request
    if has_image:
        return VISUAL_SEARCH_TEMPLATE.format(message=message)
    return message
