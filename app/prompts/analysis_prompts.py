# Prompt templates for the document analysis operations.
# Each template takes a single `{document_text}` placeholder. The expected
# JSON schema is appended by the extractor, not embedded here.

# =============================================================================
# NARRATIVE SUMMARY
# =============================================================================
NARRATIVE_SUMMARY_PROMPT = """Generate a concise narrative summary for the following document. \
Focus only on the overall summary. Other details like keywords, important points, \
and characters will be handled separately.

Document:
{document_text}"""

# =============================================================================
# KEYWORDS AND IMPORTANT POINTS
# =============================================================================
KEY_INFORMATION_PROMPT = """You are an expert at extracting key information from text documents.

Extract the keywords and important points from the following text.

Text: {document_text}

Keywords:
- ... (list of keywords)

Important Points:
- ... (list of important points)

Format your response as a JSON object that conforms to the schema."""

# =============================================================================
# CHARACTER IDENTIFICATION
# =============================================================================
CHARACTER_IDENTIFICATION_PROMPT = """You are an expert literary analyst.

Identify the characters (people, or personified beings and organizations that act \
like characters) that appear in the following text. For each character give their \
name and a brief description of who they are and the role they play in the text. \
If the text has no characters, return an empty list.

Text: {document_text}

Format your response as a JSON object that conforms to the schema."""

SCHEMA_INSTRUCTION = """

Respond with a single JSON object matching this JSON schema:
{schema}"""
