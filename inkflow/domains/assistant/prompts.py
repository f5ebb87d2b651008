"""Шаблоны запросов к генеративной модели и быстрые инструкции редактора."""

DEFAULT_PROMPT_SETTINGS = {
    "fix_grammar": "Fix grammar and spelling",
    "shorten": "Make it shorter and punchier",
    "professional": "Make it more professional",
    "expand": "Expand on this idea",
    "formal": "Rewrite this in a formal tone",
    "casual": "Rewrite this in a casual, conversational tone",
    "concise": "Make this concise and to the point",
    "summarize": "Summarize this text concisely",
}

DRAFT_SYSTEM_INSTRUCTION = (
    "You are a professional writer using markdown formatting. "
    "Use headers, bullet points, and bold text where appropriate."
)

# Сколько текста из конца документа уходит в модель
COMPLETION_WINDOW = 500
REWRITE_CONTEXT_WINDOW = 300
SUGGESTION_WINDOW = 800


def completion_prompt(text: str) -> str:
    return (
        "You are a helpful writing assistant. Provide a short completion (3-10 words) "
        "for the current sentence or thought.\n\n"
        f'Input text: "{text[-COMPLETION_WINDOW:]}"\n\n'
        "Return ONLY the completion text. No quotes."
    )


def rewrite_prompt(selection: str, instruction: str, context: str) -> str:
    return (
        "You are an expert editor.\n\n"
        f'Original Context (for reference): "...{context[-REWRITE_CONTEXT_WINDOW:]}..."\n\n'
        f'Target Selection to Rewrite: "{selection}"\n\n'
        f'User Instruction: "{instruction}"\n\n'
        "Return ONLY the rewritten text. Do not add quotes or explanations."
    )


def draft_prompt(prompt: str, context: str) -> str:
    text = f"You are a thought partner. Write a draft based on this request: {prompt}"
    if context:
        text += f"\n\nAdditional Context/Background Information:\n{context}"
    return text


def suggestion_prompt(text: str) -> str:
    return (
        "You are a proactive editor. Analyze the following text snippet "
        "(which is the end of a user's document).\n\n"
        "Focus on the last few sentences.\n"
        "If you see a clear improvement (grammar, punchiness, clarity) or a creative enhancement, "
        "suggest a replacement for a SPECIFIC phrase or sentence.\n"
        "Do not suggest changes for the sake of it. Only if it adds significant value.\n\n"
        f'Text to analyze: "{text[-SUGGESTION_WINDOW:]}"'
    )


def fact_check_prompt(text: str) -> str:
    return (
        "Fact check this text. If specific claims are dubious, point them out. "
        'If generally accurate, say "Looks accurate".\n\n'
        f'Text: "{text}"'
    )


def seo_article_prompt(topic: str, keywords: str, audience: str, tone: str) -> str:
    return (
        "You are an expert SEO Content Writer.\n\n"
        "Task: Write a high-ranking blog post.\n"
        f"Topic: {topic}\n"
        f"Target Keywords: {keywords}\n"
        f"Target Audience: {audience}\n"
        f"Tone: {tone}\n\n"
        "Requirements:\n"
        "1. Create a catchy, SEO-optimized Title (H1).\n"
        "2. Use proper Markdown structure (H2, H3, bullet points).\n"
        "3. Include a Meta Description at the very top (in a blockquote).\n"
        "4. Ensure natural keyword placement.\n"
        "5. Content should be engaging and comprehensive."
    )


def resume_prompt(job_input: str) -> str:
    return (
        "You are an expert Resume Writer and Career Coach.\n\n"
        "Task: Rewrite and optimize the user's resume for a specific job.\n\n"
        f'Job Description / URL: "{job_input}"\n\n'
        "Instructions:\n"
        "1. Analyze the Job Description (if it is a URL, use your Google Search tool to find the job details).\n"
        "2. Extract key skills and requirements.\n"
        "3. Rewrite the provided resume to highlight these skills.\n"
        "4. Improve bullet points to be impact-driven (Action Verb + Task + Result).\n"
        "5. Add a tailored Summary section.\n"
        "6. Output the full optimized resume in Markdown.\n\n"
        "After the resume, include a brief Cover Letter draft."
    )


def article_insights_prompt(url: str, title: str) -> str:
    return (
        "I have saved this article to my reading list. Please provide a concise summary "
        '(3 bullet points) and one "Key Takeaway" for a writer.\n\n'
        f'Article Title: "{title}"\n'
        f'Article URL: "{url}"\n\n'
        "If you can't access the specific URL content, infer the likely content from the title "
        "and domain, but mention that it is an estimation."
    )


def related_articles_prompt(topic: str) -> str:
    return (
        f'Find 5 high-quality, recent articles or blog posts about: "{topic}".\n'
        "Return them in a structured list with Title and URL."
    )


def social_share_prompt(title: str, summary: str) -> str:
    return (
        "Write a catchy LinkedIn/Twitter post sharing this article. Use emojis and hashtags.\n\n"
        f"Article: {title}\n"
        f"Summary: {summary}"
    )
