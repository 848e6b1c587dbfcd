from typing import Any, Dict, List

from fitcheck.core.constants import DEFAULT_PERSONAL_EMAIL_DOMAINS


DEFAULT_SCORING_RULES: List[Dict[str, Any]] = [
    {
        "name": "Decision Maker Title",
        "description": "Executives and VPs sign off on purchases",
        "condition_type": "job_title_contains",
        "condition_value": "CEO,CTO,CFO,VP,Chief,Founder",
        "points": 15,
        "category": "demographic",
        "sort_order": 1,
    },
    {
        "name": "Director or Manager Title",
        "description": None,
        "condition_type": "job_title_contains",
        "condition_value": "Director,Head of,Manager",
        "points": 10,
        "category": "demographic",
        "sort_order": 2,
    },
    {
        "name": "Business Email",
        "description": "Lead signed up with a company domain",
        "condition_type": "email_domain_business",
        "condition_value": "",
        "points": 10,
        "category": "demographic",
        "sort_order": 3,
    },
    {
        "name": "Personal Email",
        "description": "Lead signed up with a free mailbox",
        "condition_type": "email_domain_personal",
        "condition_value": "gmail.com,yahoo.com,hotmail.com,outlook.com",
        "points": -10,
        "category": "demographic",
        "sort_order": 4,
    },
    {
        "name": "Target Company Size",
        "description": None,
        "condition_type": "company_size_range",
        "condition_value": "50-200,200-500,100,250",
        "points": 15,
        "category": "firmographic",
        "sort_order": 5,
    },
    {
        "name": "Target Industry",
        "description": None,
        "condition_type": "industry_matches",
        "condition_value": "SaaS,Software,Technology,FinTech",
        "points": 15,
        "category": "firmographic",
        "sort_order": 6,
    },
    {
        "name": "Venture Funded",
        "description": None,
        "condition_type": "funding_stage",
        "condition_value": "Series A,Series B,Series C",
        "points": 10,
        "category": "firmographic",
        "sort_order": 7,
    },
    {
        "name": "Target Region",
        "description": None,
        "condition_type": "region_matches",
        "condition_value": "USA,United States,Canada,UK,Europe",
        "points": 5,
        "category": "firmographic",
        "sort_order": 8,
    },
    {
        "name": "Visited Pricing Page",
        "description": None,
        "condition_type": "visited_pricing_page",
        "condition_value": "once",
        "points": 10,
        "category": "behavioral",
        "sort_order": 9,
    },
    {
        "name": "Repeat Pricing Visits",
        "description": "More than one visit to the pricing page",
        "condition_type": "visited_pricing_page",
        "condition_value": "multiple",
        "points": 15,
        "category": "behavioral",
        "sort_order": 10,
    },
    {
        "name": "Visited Product Page",
        "description": None,
        "condition_type": "visited_product_page",
        "condition_value": "",
        "points": 5,
        "category": "behavioral",
        "sort_order": 11,
    },
    {
        "name": "Blog-Only Reader",
        "description": "Only read blog content, no product interest yet",
        "condition_type": "blog_only_engagement",
        "condition_value": "",
        "points": -5,
        "category": "behavioral",
        "sort_order": 12,
    },
]


DEFAULT_ENGAGEMENT_TYPES: List[Dict[str, Any]] = [
    {"name": "Email Open", "category": "email", "default_points": 1, "sort_order": 1},
    {"name": "Email Click", "category": "email", "default_points": 3, "sort_order": 2},
    {"name": "Email Reply", "category": "email", "default_points": 10, "sort_order": 3},
    {"name": "Whitepaper Download", "category": "content", "default_points": 8, "sort_order": 4},
    {"name": "Case Study View", "category": "content", "default_points": 5, "sort_order": 5},
    {"name": "Webinar Attended", "category": "event", "default_points": 15, "sort_order": 6},
    {"name": "Event Registration", "category": "event", "default_points": 10, "sort_order": 7},
    {"name": "Pricing Page Visit", "category": "web", "default_points": 10, "sort_order": 8},
    {"name": "Demo Request", "category": "web", "default_points": 25, "sort_order": 9},
    {"name": "Site Visit", "category": "web", "default_points": 2, "sort_order": 10},
    {"name": "Social Engagement", "category": "social", "default_points": 3, "sort_order": 11},
]


DEFAULT_NEGATIVE_RULES: List[Dict[str, Any]] = [
    {
        "name": "Personal Email Domain",
        "condition_type": "personal_email",
        "condition_value": ",".join(DEFAULT_PERSONAL_EMAIL_DOMAINS),
        "points": -10,
        "reason_label": "Uses a personal email address",
        "sort_order": 1,
    },
    {
        "name": "Job Seeker",
        "condition_type": "career_page_only",
        "condition_value": "",
        "points": -30,
        "reason_label": "Only visited career pages",
        "sort_order": 2,
    },
    {
        "name": "Competitor",
        "condition_type": "competitor",
        "condition_value": "",
        "points": -50,
        "reason_label": "Works for a known competitor",
        "sort_order": 3,
    },
    {
        "name": "Spam Source",
        "condition_type": "spam_source",
        "condition_value": "",
        "points": -40,
        "reason_label": "Came from a known spam source",
        "sort_order": 4,
    },
    {
        "name": "Fake Data",
        "condition_type": "fake_data",
        "condition_value": "",
        "points": -40,
        "reason_label": "Submitted fake or inconsistent data",
        "sort_order": 5,
    },
]


DEFAULT_ICP_CRITERIA: List[Dict[str, Any]] = [
    {
        "id": "company-size",
        "name": "Company Size",
        "weight": 20,
        "description": "Number of employees (50-500 ideal)",
    },
    {
        "id": "industry",
        "name": "Industry",
        "weight": 20,
        "description": "SaaS, Tech, or B2B Services",
    },
    {
        "id": "revenue",
        "name": "Revenue",
        "weight": 20,
        "description": "Annual revenue $5M-$100M",
    },
    {
        "id": "tech-stack",
        "name": "Tech Stack",
        "weight": 15,
        "description": "Modern tech stack alignment",
    },
    {
        "id": "funding-stage",
        "name": "Funding Stage",
        "weight": 15,
        "description": "Series A to Series C",
    },
    {
        "id": "region",
        "name": "Region",
        "weight": 10,
        "description": "North America or Europe",
    },
]
