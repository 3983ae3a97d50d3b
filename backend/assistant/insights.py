"""
Well-Architected insights pulled out of a free-text architecture rationale.

For each pillar:
1. An explicit "<Pillar>:" section -> its bullet points, or its sentences
2. Otherwise up to three sentences mentioning the pillar's keywords
3. Otherwise a single placeholder line
"""

import re
from typing import Dict, List

from assistant.ir.architecture import Architecture


# key -> (heading as it appears in rationales, fallback keywords)
PILLARS = {
    "operational": ("Operational Excellence", ["monitoring", "observability", "alarm", "deployment", "automation", "pipeline", "ci/cd"]),
    "security": ("Security", ["security", "authentication", "authorization", "encryption", "iam", "compliance", "firewall", "waf"]),
    "reliability": ("Reliability", ["failover", "redundancy", "availability", "disaster recovery", "backup", "multi-az", "resilience"]),
    "performance": ("Performance Efficiency", ["latency", "throughput", "caching", "optimization", "response time", "read replica", "performance"]),
    "cost": ("Cost Optimization", ["cost", "budget", "expense", "pricing", "savings", "reserved", "spot", "on-demand"]),
    "sustainability": ("Sustainability", ["sustainability", "carbon", "energy", "efficient", "waste", "environment"]),
}

MAX_KEYWORD_INSIGHTS = 3
BULLET_SPLIT_RE = re.compile(r"\n- |\n\*")
SENTENCE_SPLIT_RE = re.compile(r"\.\s+")


def _section_points(text: str) -> List[str]:
    points = BULLET_SPLIT_RE.split(text)

    if len(points) > 1:
        out = []
        for index, point in enumerate(points):
            # text before the first bullet is an intro, not a point
            if index == 0 and not point.strip().startswith("-"):
                continue
            cleaned = re.sub(r"^- ", "", point.strip())
            if cleaned:
                out.append(cleaned)
        return out

    return [
        sentence.strip().rstrip(".") + "."
        for sentence in SENTENCE_SPLIT_RE.split(text)
        if sentence.strip()
    ]


def _keyword_sentences(rationale: str, keywords: List[str]) -> List[str]:
    found: List[str] = []
    for keyword in keywords:
        pattern = re.compile(rf"[^.!?]*(?:{re.escape(keyword)})[^.!?]*[.!?]", re.IGNORECASE)
        for match in pattern.finditer(rationale):
            sentence = match.group(0).strip()
            if sentence not in found:
                found.append(sentence)
    return found[:MAX_KEYWORD_INSIGHTS]


def pillar_insights(rationale: str, heading: str, keywords: List[str]) -> List[str]:
    section = re.search(rf"{re.escape(heading)}[:\s]([^#]+)", rationale, re.IGNORECASE)
    if section and section.group(1).strip():
        points = _section_points(section.group(1).strip())
        if points:
            return points

    sentences = _keyword_sentences(rationale, keywords)
    if sentences:
        return sentences

    return [f"Review the detailed rationale for {heading.lower()} considerations."]


def extract_pillar_insights(rationale: str) -> Dict[str, List[str]]:
    rationale = rationale or ""
    return {
        key: pillar_insights(rationale, heading, keywords)
        for key, (heading, keywords) in PILLARS.items()
    }


def summarize_services(architecture: Architecture) -> List[Dict[str, str]]:
    return [
        {
            "id": node.id,
            "service": node.data.service or "Unknown Service",
            "purpose": node.data.description or "No description available",
            "estCost": node.data.est_cost or "N/A",
            "faultTolerance": node.data.fault_tolerance or "N/A",
        }
        for node in architecture.nodes
    ]
