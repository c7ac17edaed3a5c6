"""
Pipeline - Content Summarizer

Builds a bounded evidence context from retrieved and scraped content and
synthesizes one answer with the completion capability.
"""

import logging
from typing import Dict, List, Mapping

from honig.llm.base_provider import BaseLLMProvider
from honig.schemas import (
    Candidate,
    ContentCategory,
    ExtractedArticle,
    Query,
    QueryType,
    SourceKind,
    SynthesisResult,
)


logger = logging.getLogger(__name__)


QUERY_TYPE_INSTRUCTIONS: Dict[QueryType, str] = {
    QueryType.FACTUAL: """FACTUAL QUERY GUIDELINES:
- Focus on objective facts and verified information
- Prioritize authoritative sources such as encyclopedia and academic content
- Present information clearly and systematically
- Include specific data, dates, and figures when available""",
    QueryType.OPINION: """OPINION QUERY GUIDELINES:
- Present multiple perspectives from different sources
- Label these as opinions and experiences, not facts
- Highlight common themes and divergent viewpoints
- Include context about who is expressing these opinions""",
    QueryType.NEWS: """NEWS QUERY GUIDELINES:
- Focus on recent developments and current events
- Include timeline information when relevant
- Mention source credibility and publication dates
- Distinguish between confirmed facts and developing stories""",
    QueryType.TECHNICAL: """TECHNICAL QUERY GUIDELINES:
- Provide detailed technical explanations
- Include step-by-step processes when applicable
- Use appropriate technical terminology
- Reference authoritative technical sources and documentation""",
    QueryType.GENERAL: """GENERAL QUERY GUIDELINES:
- Provide a balanced overview of the topic
- Include both factual information and relevant perspectives
- Structure the response logically from general to specific
- Make the information accessible to a general audience""",
}

SYNTHESIS_PROMPT = """You are a content synthesis engine. Provide a comprehensive, accurate, and well-structured response based on the retrieved information.

ORIGINAL QUERY: "{original}"
REFINED QUERY: "{refined}"
QUERY TYPE: {query_type}

{instructions}

RETRIEVED INFORMATION:
{context}

SYNTHESIS INSTRUCTIONS:
1. Provide a clear, comprehensive answer to the user's question
2. Synthesize information from multiple sources when possible
3. Cite the sources you rely on as [Source N]
4. Structure your response with clear sections if the topic is complex
5. If sources conflict, acknowledge the different perspectives

IMPORTANT:
- Base your response ONLY on the provided information
- If the information is insufficient, clearly state what is missing
- Do not make assumptions beyond what the sources provide

Provide your synthesized response:"""


class SynthesisError(RuntimeError):
    """The completion capability failed during synthesis."""


class ContentSummarizer:
    """Evidence context builder and answer synthesizer."""

    def __init__(self, llm_provider: BaseLLMProvider, max_source_chars: int = 2000):
        self.llm_provider = llm_provider
        self.max_source_chars = max_source_chars

    async def synthesize(
        self,
        query: Query,
        candidates: List[Candidate],
        extracted: Mapping[str, ExtractedArticle],
    ) -> SynthesisResult:
        """
        Synthesize an answer from ranked evidence.

        Args:
            query: Classified query
            candidates: Candidates in ranking order
            extracted: Successfully scraped articles keyed by URL

        Returns:
            SynthesisResult with answer text and confidence

        Raises:
            SynthesisError: if the completion call fails
        """
        context = self.build_context(candidates, extracted)
        prompt = self.build_prompt(query, context)

        try:
            answer = await self.llm_provider.generate(prompt)
        except Exception as e:
            raise SynthesisError(f"Summarization failed: {e}") from e

        return SynthesisResult(
            answer_text=answer,
            confidence=self.calculate_confidence(candidates, extracted),
        )

    def build_context(
        self,
        candidates: List[Candidate],
        extracted: Mapping[str, ExtractedArticle],
    ) -> str:
        """One block per candidate: scraped body if available, else snippet."""
        parts = []
        for index, candidate in enumerate(candidates, start=1):
            header = f"[Source {index}: {candidate.title} - {candidate.source_kind.value}]"
            article = extracted.get(candidate.url)
            if article is not None and article.body_text:
                body = article.body_text
                if len(body) > self.max_source_chars:
                    body = body[:self.max_source_chars] + "..."
            else:
                body = candidate.snippet
            parts.append(f"{header}\n{body}\n")

        return "\n---\n\n".join(parts)

    @staticmethod
    def build_prompt(query: Query, context: str) -> str:
        return SYNTHESIS_PROMPT.format(
            original=query.original_text,
            refined=query.refined_text,
            query_type=query.type.value,
            instructions=QUERY_TYPE_INSTRUCTIONS[query.type],
            context=context or "No sources were retrieved.",
        )

    @staticmethod
    def calculate_confidence(
        candidates: List[Candidate],
        extracted: Mapping[str, ExtractedArticle],
    ) -> float:
        """Confidence from source count, scrape coverage, and diversity."""
        confidence = 0.5

        confidence += min(0.3, len(candidates) * 0.05)

        scraped = sum(1 for c in candidates if c.url in extracted)
        confidence += (scraped / max(1, len(candidates))) * 0.2

        kinds = {c.source_kind for c in candidates}
        confidence += min(0.2, len(kinds) * 0.05)

        if SourceKind.ENCYCLOPEDIA in kinds:
            confidence += 0.1
        if any(c.content_category == ContentCategory.NEWS for c in candidates):
            confidence += 0.05
        if SourceKind.ACADEMIC in kinds:
            confidence += 0.1

        return max(0.0, min(1.0, confidence))
