import requests

from zhijiao.core import config


class GeminiAPIError(Exception):
    """Raised when the generateContent endpoint answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f'Gemini API Error: {status_code}')


def build_generate_url(model: str | None = None) -> str:
    return f"{config.GEMINI_API_BASE.rstrip('/')}/models/{model or config.GEMINI_MODEL}:generateContent"


def extract_reply_text(data: dict) -> str:
    try:
        text = data['candidates'][0]['content']['parts'][0]['text']
    except (KeyError, IndexError, TypeError):
        return 'No response'
    return text or 'No response'


def generate_reply(message: str, api_key: str) -> str:
    response = requests.post(
        build_generate_url(),
        params={'key': api_key},
        headers={'Content-Type': 'application/json'},
        json={'contents': [{'parts': [{'text': message}]}]},
        timeout=config.CHAT_TIMEOUT_SECONDS,
    )
    if not response.ok:
        raise GeminiAPIError(response.status_code, response.text)
    return extract_reply_text(response.json())
