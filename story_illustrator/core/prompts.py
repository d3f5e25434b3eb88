STORY_PREVIEW_LIMIT = 200
ELLIPSIS = "..."


def build_analysis_prompt(story: str) -> str:
    """
    Builds the first-stage prompt asking the model for visual elements,
    three style suggestions and a title in a fixed marker layout.
    """
    return f"""You are an insightful literary analyst and art style consultant. Analyze the following short story/anecdote: "{story}".

1. Identify the 3-4 most important visual elements (characters, setting, key objects, core action/emotion).
2. Suggest 3 distinct illustration styles that would be fitting for this story's mood and content (e.g., 'Whimsical Children's Book', 'Dramatic Graphic Novel Panel', 'Minimalist Line Art', 'Vibrant Watercolor', 'Vintage Storybook', 'Modern Digital Art'). List each style on a new line.
3. Create a short, evocative title (max 5-7 words) for this story snippet.

Structure your response clearly:
VISUAL ELEMENTS: [list the elements]
STYLE OPTIONS:
- [Style 1]
- [Style 2] 
- [Style 3]
TITLE: [suggested title]"""


def story_preview(story: str, limit: int = STORY_PREVIEW_LIMIT) -> str:
    # Hard cut at the limit, not word-boundary aware.
    if len(story) > limit:
        return story[:limit] + ELLIPSIS
    return story


def build_illustration_prompt(story: str, visual_elements: str, style: str) -> str:
    """Builds the second-stage image prompt from a bounded story preview."""
    preview = story_preview(story)
    return (
        f"Illustrate a key moment from the following story: \"{preview}\".\n\n"
        f"The main visual elements to include are: {visual_elements}.\n\n"
        f"Render this scene in a \"{style}\" illustration style.\n\n"
        "Focus on capturing the core emotion and atmosphere of the story. "
        "The image should be a single, compelling illustration that brings this story to life. "
        "Make it artistic, detailed, and emotionally resonant."
    )
