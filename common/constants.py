"""
Constants for the A-level CS tutor client.
"""

# Models
MODEL_CHAT_DEFAULT = 'gemini-3-pro-preview'
MODEL_FAST = 'gemini-2.5-flash'
MODEL_THINKING = 'gemini-3-pro-preview'
MODEL_IMAGE_GEN = 'gemini-3-pro-image-preview'
MODEL_IMAGE_EDIT = 'gemini-2.5-flash-image'
MODEL_LIVE = 'gemini-2.5-flash-native-audio-preview-09-2025'

DEFAULT_MODELS = {
    'chat_default': MODEL_CHAT_DEFAULT,
    'fast': MODEL_FAST,
    'thinking': MODEL_THINKING,
    'image_gen': MODEL_IMAGE_GEN,
    'image_edit': MODEL_IMAGE_EDIT,
    'live': MODEL_LIVE,
}

THINKING_BUDGET = 32768

# Personas
PERSONA_STANDARD = 'standard'
PERSONA_SOCRATIC = 'socratic'
PERSONA_EXAMINER = 'examiner'
PERSONAS = (PERSONA_STANDARD, PERSONA_SOCRATIC, PERSONA_EXAMINER)

# Languages
LANG_EN = 'en'
LANG_ZH = 'zh'
LANGUAGES = (LANG_EN, LANG_ZH)

# Mock exam papers
PAPER_THEORY = 'paper1'
PAPER_CODING = 'paper2'
PAPER_TYPES = (PAPER_THEORY, PAPER_CODING)
MOCK_PAPER_DURATION_MINUTES = 30
MOCK_PAPER_QUESTION_COUNT = 3
QUIZ_QUESTION_COUNT = 5

# Image generation
DEFAULT_ASPECT_RATIO = '1:1'
DEFAULT_IMAGE_SIZE = '1K'
ASPECT_RATIOS = ('1:1', '2:3', '3:2', '3:4', '4:3', '4:5', '5:4', '9:16', '16:9', '21:9')
IMAGE_SIZES = ('1K', '2K', '4K')
EDIT_SOURCE_MIME_TYPE = 'image/png'

# Fallback values
FALLBACK_CHAT_EMPTY = "No response."
FALLBACK_CHAT_ERROR = "Connection error."
FALLBACK_GRADE_EMPTY = "No feedback."
FALLBACK_GRADE_ERROR = "Error grading."
FALLBACK_ANALYSIS_EMPTY = "Analysis failed."
FALLBACK_ANALYSIS_ERROR = "Error analyzing code."
ERROR_PAPER_ID = 'error'
ERROR_PAPER_TITLE = 'Error'
ERROR_RESULT_GRADE = 'U'
ERROR_RESULT_FEEDBACK = 'Error'

# Environment
API_KEY_ENV_VARS = ('GEMINI_API_KEY', 'GOOGLE_API_KEY')
