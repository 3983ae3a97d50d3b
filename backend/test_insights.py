from assistant.insights import extract_pillar_insights, summarize_services


def test_explicit_section_with_bullets():
    rationale = "Security:\n- WAF in front of the API\n- KMS encryption at rest\n# Next"

    insights = extract_pillar_insights(rationale)

    assert insights["security"] == ["WAF in front of the API", "KMS encryption at rest"]


def test_explicit_section_with_sentences():
    rationale = "Reliability: Tables are replicated. Lambda retries failed events."

    insights = extract_pillar_insights(rationale)

    assert insights["reliability"] == ["Tables are replicated.", "Lambda retries failed events."]


def test_keyword_fallback_limits_and_dedupes():
    rationale = (
        "We keep latency low. Caching sits in front. Throughput scales. "
        "Response time is monitored. Read replica helps."
    )

    insights = extract_pillar_insights(rationale)

    # keyword order decides, not sentence order
    assert insights["performance"] == ["We keep latency low.", "Throughput scales.", "Caching sits in front."]


def test_placeholder_when_nothing_matches():
    insights = extract_pillar_insights("")

    assert insights["sustainability"] == [
        "Review the detailed rationale for sustainability considerations."
    ]
    assert len(insights) == 6


def test_summarize_services(architecture):
    rows = summarize_services(architecture)

    assert rows[0]["service"] == "API Gateway"
    assert rows[0]["estCost"] == "$10/month"
    assert rows[1]["purpose"] == "No description available"
    assert rows[1]["faultTolerance"] == "N/A"
