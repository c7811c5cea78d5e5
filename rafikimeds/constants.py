"""All magic values live here — no inline literals anywhere else."""

# Telegram chat action re-send interval (seconds).
# A chat action expires after ~5 s, so we refresh every 4 s.
TELEGRAM_ACTION_INTERVAL: float = 4.0

# Analysis backends
ANALYSIS_BACKEND_AUTO = "auto"
ANALYSIS_BACKEND_CLAUDE = "claude"
ANALYSIS_BACKEND_OPENAI = "openai"
ANALYSIS_BACKENDS = (ANALYSIS_BACKEND_AUTO, ANALYSIS_BACKEND_CLAUDE, ANALYSIS_BACKEND_OPENAI)
CLAUDE_ANALYSIS_MODEL = "claude-sonnet-4-5-20250929"
CLAUDE_ANALYSIS_MAX_TOKENS = 1024
OPENAI_ANALYSIS_MODEL = "gpt-4o"

ANALYSIS_PROMPT = (
    "Analyze this image of a medicine packaging or prescription.\n"
    "Extract the key information and translate it into {language}.\n"
    "\n"
    "Crucial rules:\n"
    "1. Simplify the language for a non-medical person "
    '(e.g., instead of "QD", say "Once a day").\n'
    "2. If the text is not in {language}, translate the extracted information into {language}.\n"
    "3. Keep it culturally relevant for East Africa.\n"
    "4. Return the data in JSON format.\n"
    "\n"
    "Reply with ONLY a JSON object with these keys:\n"
    '- "medicineName" (string): name of the medicine\n'
    '- "purpose" (string): what it treats, kept simple\n'
    '- "dosage" (string): how many pills/spoons to take\n'
    '- "frequency" (string): when to take it (e.g., Morning and Night)\n'
    '- "warnings" (array of strings): important warnings (e.g., Take with food, Do not drive)\n'
    '- "storage" (string): how to store it\n'
    '- "isAntibiotic" (boolean): is this an antibiotic?'
)

# Raw response field names
FIELD_ID = "id"
FIELD_TIMESTAMP = "timestamp"
FIELD_MEDICINE_NAME = "medicineName"
FIELD_PURPOSE = "purpose"
FIELD_DOSAGE = "dosage"
FIELD_FREQUENCY = "frequency"
FIELD_WARNINGS = "warnings"
FIELD_STORAGE = "storage"
FIELD_IS_ANTIBIOTIC = "isAntibiotic"
REQUIRED_FIELDS = (
    FIELD_MEDICINE_NAME,
    FIELD_PURPOSE,
    FIELD_DOSAGE,
    FIELD_FREQUENCY,
    FIELD_WARNINGS,
    FIELD_STORAGE,
)

# Speech synthesis — the service returns raw PCM, 16-bit signed, mono, 24 kHz
OPENAI_SPEECH_MODEL = "gpt-4o-mini-tts"
OPENAI_SPEECH_VOICE = "coral"
OPENAI_SPEECH_FORMAT = "pcm"
SPEECH_INSTRUCTIONS = "Speak slowly and clearly in {language}, like a friendly pharmacist."
PCM_SAMPLE_RATE = 24000
PCM_CHANNELS = 1
PCM_SAMPLE_WIDTH = 2
PCM_FULL_SCALE = 32768.0
SPEECH_FILENAME = "medicine.wav"
# Headers of encoded/containerised audio, which the PCM contract forbids.
# Raw samples can spell a short magic, so each one needs a structural confirmation.
WAV_RIFF_MAGIC = b"RIFF"
WAV_FORM_TYPE = b"WAVE"
OGG_CAPTURE_PATTERN = b"OggS\x00"
FLAC_MAGIC = b"fLaC"
FLAC_STREAMINFO = 0
FLAC_STREAMINFO_LENGTH = 34
ID3_MAGIC = b"ID3"
ID3_VERSIONS = (2, 3, 4)

# History
HISTORY_KEY = "medication_history"
HISTORY_MAX_ENTRIES = 10
DEFAULT_HISTORY_PATH = ".medication_history.json"

# Log messages
MSG_BOT_STARTING = "Starting RafikiMeds bot…"
MSG_BLOCKED_CHAT = "Blocked update from chat_id: %s"
MSG_SEND_OK = "✓ Sent (%.1fs)"
MSG_SEND_FAIL = "✗ Send failed (%.1fs)"
MSG_LOG_ANALYSIS_FAILED = "Analysis failed: %s"
MSG_LOG_SPEECH_FAILED = "Speech synthesis failed: %s"
MSG_LOG_STALE_RESULT = "Discarding result of superseded request #%d (latest is #%d)"

# User-facing status messages
MSG_ANALYZING = "Analyzing instructions..."
MSG_ANALYSIS_FAILED = "Could not read image. Please try again with good lighting."
MSG_SPEECH_FAILED = "Could not generate audio."
MSG_SPEECH_NOT_CONFIGURED = "Audio is not supported in this setup."
MSG_NO_RESULT = "Nothing to show yet — send a photo of your medicine first."
MSG_BUSY = "Still reading your last photo — please wait a moment."
MSG_CLEARED = "Cleared — send another photo when you are ready."
MSG_NOT_AN_IMAGE = "Please send a photo of the medicine box or prescription."

# Result card
CARD_ANTIBIOTIC = "⚠️ ANTIBIOTIC — finish the full course"
CARD_MEDICINE = "💊 %s"
CARD_PURPOSE = "📝 %s"
CARD_DOSAGE = "🔢 Dose: %s"
CARD_FREQUENCY = "⏰ When: %s"
CARD_STORAGE = "📦 Storage: %s"
CARD_WARNINGS = "⚠️ Warnings:"
CARD_WARNING_ITEM = "  • %s"
CARD_FOOTER = "AI can make mistakes. Always consult a doctor or pharmacist for critical medical advice."

SHARE_TEXT = (
    "*RafikiMeds Instructions*\n\n"
    "💊 *Medicine:* %s\n"
    "📝 *Purpose:* %s\n"
    "🔢 *Dose:* %s\n"
    "⏰ *When:* %s\n"
    "⚠️ *Warnings:* %s\n\n"
    "_Translated to %s_"
)

# /language command
CMD_LANGUAGE = "language"
MSG_LANGUAGE_CURRENT = "Current language: %s\nAvailable: %s\nUsage: /language <name>"
MSG_LANGUAGE_SET = "Language set to: %s — it applies to your next photo."
MSG_LANGUAGE_UNKNOWN = "Unknown language: %s\nAvailable: %s"

# /history and /open commands
CMD_HISTORY = "history"
CMD_OPEN = "open"
MSG_HISTORY_EMPTY = "No history yet — send a photo first."
MSG_HISTORY_HEADER = "Last %d scans:"
MSG_HISTORY_ITEM = "%d. %s (%s)"
MSG_HISTORY_FOOTER = "\nUse /open <number> to see one again."
MSG_OPEN_USAGE = "Usage: /open <number> — see /history for the list."
MSG_OPEN_NOT_FOUND = "No scan with number %s — see /history for the list."
HISTORY_TIME_FORMAT = "%Y-%m-%d %H:%M"

# Other commands
CMD_LISTEN = "listen"
CMD_SHARE = "share"
CMD_STATUS = "status"
CMD_CLEAR = "clear"
CMD_HELP = "help"
CMD_START = "start"
MSG_STATUS = (
    "Status\n"
    "  State    : %s\n"
    "  Language : %s\n"
    "  Analysis : %s\n"
    "  Audio    : %s\n"
    "  History  : %d saved\n"
)

MSG_HELP = (
    "RafikiMeds — understand your medicine instantly\n"
    "\n"
    "Take a photo of any medicine box or prescription and send it here.\n"
    "The instructions come back simplified and translated, and can be read aloud.\n"
    "\n"
    "Commands:\n"
    "  /help                 — show this message\n"
    "  /language <name>      — translate into Kinyarwanda, Swahili, French or English\n"
    "  /listen               — read the last result aloud\n"
    "  /share                — share-ready text of the last result\n"
    "  /history              — your last scans\n"
    "  /open <number>        — show a past scan again\n"
    "  /clear                — clear the current result\n"
    "  /status               — current settings at a glance\n"
    "\n"
    "AI can make mistakes. Always consult a doctor or pharmacist for critical medical advice."
)
