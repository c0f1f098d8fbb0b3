"""
Centralized constants for Texify.
Fixed values shared by the converter, the API and the CLI.
"""

# ===========================================
# FILE HANDLING
# ===========================================
PDF_MIME_TYPE = 'application/pdf'
DOCX_MIME_TYPE = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'
TEX_MIME_TYPE = 'application/x-tex'
HTML_MIME_TYPE = 'text/html'
DEFAULT_MIME_TYPE = 'application/octet-stream'

SUPPORTED_DOCUMENT_TYPES = [PDF_MIME_TYPE, DOCX_MIME_TYPE]
EXTENSION_MIME_TYPES = {
    '.pdf': PDF_MIME_TYPE,
    '.docx': DOCX_MIME_TYPE,
    '.tex': TEX_MIME_TYPE,
}
STYLE_FILE_EXTENSION = '.tex'
MAX_FILE_SIZE_MB = 50                 # upload limit

# ===========================================
# MODEL
# ===========================================
DEFAULT_PROVIDER = 'gemini'
DEFAULT_MODEL = 'gemini-2.5-flash'
MODEL_MAX_TOKENS = 8192
MODEL_TEMPERATURE = 0.2
MODEL_TIMEOUT_SECONDS = 300

# ===========================================
# MESSAGES
# ===========================================
MSG_INVALID_DOCUMENT = 'Please upload a valid PDF or DOCX file.'
MSG_INVALID_STYLE_FILE = 'Style file must be a .tex file.'
MSG_UNSUPPORTED_TYPE = 'Unsupported file type'
MSG_MISSING_API_KEY = 'API Key is missing. Please check your environment variables.'
MSG_MAMMOTH_MISSING = 'Mammoth library not loaded for DOCX conversion'
MSG_UNEXPECTED_ERROR = 'An unexpected error occurred.'
MSG_DOC_TO_LATEX_FAILED = 'Failed to convert document.'
MSG_LATEX_TO_DOC_FAILED = 'Failed to convert LaTeX to document.'

EMPTY_LATEX_OUTPUT = '% No output generated.'
EMPTY_DOC_OUTPUT = 'No output generated.'

# ===========================================
# RESULT VIEWER
# ===========================================
DOWNLOAD_BASENAME = 'converted_output'
PREVIEW_SANDBOX = 'allow-same-origin'
LATEX_HEADER_LABEL = 'main.tex'
HTML_HEADER_LABEL = 'output.html'

# ===========================================
# API / SERVER
# ===========================================
API_RATE_LIMIT = '60/minute'          # requests per minute
CONVERT_RATE_LIMIT = '10/minute'      # model calls per minute
SESSION_TIMEOUT_MINUTES = 120
DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 8000

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_NAME = 'texify.log'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
