"""Error Handler - provides user-friendly error messages for stage failures."""

from typing import Optional


def format_error_message(
    operation: str,
    error: Exception,
    context: Optional[dict] = None,
    suggestion: Optional[str] = None,
) -> str:
    """
    Format a user-friendly error message.

    Args:
        operation: What operation was being performed (e.g., "Narration synthesis")
        error: The exception that occurred
        context: Additional context (e.g., {"stage": "composed", "run_id": "run_123"})
        suggestion: Optional suggestion for how to fix the issue

    Returns:
        Formatted error message
    """
    error_type = type(error).__name__
    error_msg = str(error)

    # Build context string
    context_str = ""
    if context:
        context_parts = [f"{k}={v}" for k, v in context.items()]
        context_str = f" ({', '.join(context_parts)})"

    # Build message
    message = f"{operation} failed{context_str}: {error_type}: {error_msg}"

    if suggestion:
        message += f"\n   Suggestion: {suggestion}"

    return message


def get_fallback_suggestion(service: str, error: Exception) -> Optional[str]:
    """
    Get a suggestion for how to handle a service failure.

    Args:
        service: Service name (e.g., "Script Generation", "TTS", "YouTube Upload")
        error: The exception

    Returns:
        Suggestion string or None
    """
    error_msg = str(error).lower()

    if service == "Script Generation":
        if "api key" in error_msg or "not configured" in error_msg:
            return "Check OPENAI_API_KEY in your .env file."
        elif "rate limit" in error_msg or "429" in error_msg:
            return "OpenAI rate limit exceeded. Wait a few minutes and run again."
        elif "json" in error_msg:
            return "The model returned malformed JSON. Running again usually succeeds."
        else:
            return "Script generation failed. Check the logs for the model response."

    elif service == "TTS":
        if "api key" in error_msg or "401" in error_msg or "not configured" in error_msg:
            return "Check ELEVENLABS_API_KEY and DEFAULT_VOICE_ID in your .env file."
        elif "rate limit" in error_msg or "429" in error_msg or "quota" in error_msg:
            return "ElevenLabs quota or rate limit reached. Wait and try again."
        elif "network" in error_msg or "timeout" in error_msg:
            return "Network error. Check your internet connection."
        else:
            return "Narration synthesis failed. Check the logs for the provider response."

    elif service == "Stock Images":
        if "429" in error_msg or "rate limit" in error_msg:
            return "Pexels rate limit reached. Placeholder images will be used if nothing downloads."
        elif "status 401" in error_msg or "status 403" in error_msg:
            return "Check PEXELS_API_KEY in your .env file."
        else:
            return None

    elif service == "Video Composition":
        if "not found" in error_msg and "ffmpeg" in error_msg:
            return "Install ffmpeg and make sure it is on PATH (or set FFMPEG_BINARY)."
        elif "timeout" in error_msg or "exceeded" in error_msg:
            return "ffmpeg took too long. Raise FFMPEG_TIMEOUT_SECONDS or check the input files."
        else:
            return "ffmpeg failed. The working directory keeps input_list.txt and the inputs for inspection."

    elif service == "Subtitles":
        return "The generated script had no usable sentences. Run again to get a new script."

    elif service == "Thumbnail":
        return "Thumbnail rendering failed. Check FONT_PATH and the thumbnail colour settings."

    elif service == "YouTube Upload":
        if "oauth" in error_msg or "authentication" in error_msg or "invalid_grant" in error_msg:
            return "YouTube authentication failed. Refresh YT_REFRESH_TOKEN or the token file."
        elif "quota" in error_msg or "rate limit" in error_msg or "429" in error_msg:
            return "YouTube API quota exceeded. Wait and try again later."
        elif "network" in error_msg or "timeout" in error_msg:
            return "Network error during upload. The video is saved locally."
        else:
            return "Upload failed. The video is saved locally. Check logs for details."

    return None
