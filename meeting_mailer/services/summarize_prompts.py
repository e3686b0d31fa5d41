SYSTEM_PROMPT = (
    "You are a helpful assistant that analyzes meeting transcripts "
    "and creates concise summaries and action items."
)

# appended to the system message when the provider has no JSON response mode
JSON_ONLY_INSTRUCTION = (
    "\nAlways answer with a single valid JSON object and nothing else: "
    "no Markdown, no code fences, no commentary before or after it."
)

USER_TEMPLATE = """
Please analyze the following meeting transcript and provide:
1. An executive summary (2-3 paragraphs)
2. A list of action items with assigned owners

Meeting Transcript:
{transcript}

Format the response as JSON with the following structure:
{{
  "summary": "executive summary text",
  "actionItems": [
    {{
      "item": "action item description",
      "owner": "person responsible",
      "timeline": "estimated timeline if mentioned"
    }}
  ]
}}
"""
