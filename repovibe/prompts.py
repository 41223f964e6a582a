"""
Prompt for the issue analysis.

The prompt spells out the exact JSON shape of Suggestions (see models.py)
so the model's answer can be parsed by the normalizer. Literal braces in
the schema are doubled because PromptTemplate uses str.format syntax.
"""

from langchain_core.prompts import PromptTemplate

from .models import Issue

ANALYSIS_TEMPLATE = """
You are an expert software engineer and open source contributor. Analyze this GitHub issue and provide helpful suggestions for solving it.

Repository: {repository}
Language: {language}
Issue Title: {title}
Issue Body: {body}
Labels: {labels}
Comments: {comments}

Please provide a structured analysis in the following JSON format:

{{
  "problemAnalysis": {{
    "summary": "Brief summary of what the issue is about",
    "complexity": "easy|medium|hard",
    "estimatedTime": "1-2 hours|1-2 days|1-2 weeks|unknown",
    "keyChallenges": ["challenge1", "challenge2", "challenge3"]
  }},
  "solutionApproach": {{
    "steps": [
      "Step 1: Description",
      "Step 2: Description",
      "Step 3: Description"
    ],
    "technologies": ["tech1", "tech2", "tech3"],
    "filesToModify": ["file1.js", "file2.js"]
  }},
  "codeExamples": {{
    "snippets": [
      {{
        "language": "javascript",
        "code": "// Example code snippet",
        "description": "What this code does"
      }}
    ]
  }},
  "prGuidelines": {{
    "title": "Suggested PR title",
    "description": "Suggested PR description template",
    "checklist": [
      "Checklist item 1",
      "Checklist item 2",
      "Checklist item 3"
    ]
  }},
  "resources": {{
    "documentation": ["link1", "link2"],
    "examples": ["example1", "example2"],
    "relatedIssues": ["issue1", "issue2"]
  }},
  "contributionTips": [
    "Tip 1 for contributing",
    "Tip 2 for contributing",
    "Tip 3 for contributing"
  ]
}}

Focus on practical, actionable advice. If this is a good first issue, provide extra guidance for beginners. If it's complex, break it down into manageable steps.
"""

ANALYSIS_PROMPT = PromptTemplate.from_template(ANALYSIS_TEMPLATE)


def build_analysis_prompt(issue: Issue, repository: str, language: str = "Unknown") -> str:
    """Fill the analysis template with one issue's context."""
    return ANALYSIS_PROMPT.format(
        repository=repository,
        language=language or "Unknown",
        title=issue.title,
        body=issue.body or "",
        labels=", ".join(issue.label_names),
        comments=issue.comments
    )
