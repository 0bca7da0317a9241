"""
Crisis Resources
================
Static directory of crisis hotlines, therapist finders and self-help links
per country. Pure lookup, no database.
"""

from __future__ import annotations

from typing import Optional

from app.models.resources import CountryResources, CrisisLine, ResourceLink


def _country(code: str, name: str, crisis: list[tuple[str, str, str, str]],
             therapist: tuple[str, str], resources: tuple[str, str]) -> CountryResources:
    return CountryResources(
        code=code,
        name=name,
        crisis=[CrisisLine(icon=i, text=t, tel=tel, desc=d) for i, t, tel, d in crisis],
        therapist=ResourceLink(url=therapist[0], text=therapist[1]),
        resources=ResourceLink(url=resources[0], text=resources[1]),
    )


COUNTRY_RESOURCES: dict[str, CountryResources] = {
    c.code: c
    for c in (
        _country(
            "KE", "Kenya",
            [
                ("phone", "Crisis Hotline: 1199", "1199", "Kenya Red Cross 24/7"),
                ("phone", "Befrienders: +254 722 178 177", "+254722178177", "Daily 10 AM - 10 PM"),
                ("phone", "GVRC: +254 709 400 350", "+254709400350", "Gender Violence Support 24/7"),
            ],
            ("https://kenyapsychology.org", "Kenya Psychological Association"),
            ("https://www.who.int/kenya/health-topics/mental-health", "WHO Kenya Mental Health"),
        ),
        _country(
            "US", "United States",
            [
                ("phone", "Crisis Hotline: 988", "988", "Suicide & Crisis Lifeline 24/7"),
                ("comment", "Crisis Text: Text HOME to 741741", "", "Crisis Text Line"),
                ("phone", "SAMHSA: 1-800-662-4357", "18006624357", "Treatment Referrals 24/7"),
            ],
            ("https://www.psychologytoday.com/us/therapists", "Psychology Today Directory"),
            ("https://www.nimh.nih.gov/health/topics", "NIMH Self-Help Resources"),
        ),
        _country(
            "GB", "United Kingdom",
            [
                ("phone", "Samaritans: 116 123", "116123", "24/7 Free Support"),
                ("phone", "Crisis Text: Text SHOUT to 85258", "", "Text Support 24/7"),
                ("phone", "NHS Mental Health: 111", "111", "NHS Mental Health Support"),
            ],
            (
                "https://www.nhs.uk/service-search/mental-health/find-a-psychological-therapies-service/",
                "NHS Therapy Services",
            ),
            ("https://www.mind.org.uk/", "Mind UK Resources"),
        ),
        _country(
            "CA", "Canada",
            [
                ("phone", "Crisis Hotline: 1-833-456-4566", "18334564566", "Canada Suicide Prevention 24/7"),
                ("comment", "Crisis Text: Text 45645", "", "Crisis Text Line"),
                ("phone", "Kids Help: 1-800-668-6868", "18006686868", "For Youth 24/7"),
            ],
            ("https://www.psychologytoday.com/ca/therapists", "Psychology Today Canada"),
            ("https://www.camh.ca/", "CAMH Mental Health Resources"),
        ),
        _country(
            "AU", "Australia",
            [
                ("phone", "Lifeline: 13 11 14", "131114", "24/7 Crisis Support"),
                ("phone", "Beyond Blue: 1300 22 4636", "1300224636", "Mental Health Support 24/7"),
                ("phone", "Kids Helpline: 1800 55 1800", "1800551800", "For Youth 5-25 years"),
            ],
            ("https://www.psychology.org.au/find-a-psychologist", "Find a Psychologist"),
            ("https://www.headtohealth.gov.au/", "Head to Health Resources"),
        ),
        _country(
            "IN", "India",
            [
                ("phone", "Vandrevala: 1860 2662 345", "18602662345", "24/7 Mental Health Support"),
                ("phone", "iCall: 9152987821", "9152987821", "Mon-Sat 8 AM - 10 PM"),
                ("phone", "AASRA: 91-9820466726", "919820466726", "24/7 Suicide Prevention"),
            ],
            ("https://www.psychologytoday.com/intl/counselling/in", "Find Therapists in India"),
            ("https://www.nimhans.ac.in/", "NIMHANS Resources"),
        ),
        _country(
            "ZA", "South Africa",
            [
                ("phone", "LifeLine: 0861 322 322", "0861322322", "24/7 Counselling"),
                ("phone", "SADAG: 0800 567 567", "0800567567", "Depression & Anxiety 24/7"),
                ("comment", "SMS: 31393", "", "Text Support"),
            ],
            ("https://www.psyssa.com/", "Psychological Society of SA"),
            ("https://www.sadag.org/", "SADAG Mental Health Resources"),
        ),
        _country(
            "NG", "Nigeria",
            [
                ("phone", "Mental Health: 0800 CALL MANI", "", "Free Mental Health Support"),
                ("phone", "Suicide Research: +234 806 210 6493", "+2348062106493", "Crisis Support"),
                ("phone", "Emergency: 112", "112", "General Emergency"),
            ],
            ("https://www.psychologytoday.com/intl/counselling/ng", "Find Therapists in Nigeria"),
            ("https://www.who.int/nigeria/health-topics/mental-health", "WHO Nigeria Mental Health"),
        ),
        _country(
            "GH", "Ghana",
            [
                ("phone", "Mental Health Authority: 0800 463 628", "0800463628", "Mental Health Support"),
                ("phone", "Emergency: 112", "112", "General Emergency Services"),
                ("phone", "Lifeline Ghana: +233 244 846 701", "+233244846701", "Crisis Support"),
            ],
            ("https://www.moh.gov.gh/", "Ghana Ministry of Health"),
            ("https://www.who.int/ghana", "WHO Ghana Resources"),
        ),
    )
}


def get_country_resources(code: str) -> Optional[CountryResources]:
    """Case-insensitive lookup. Returns None for unsupported countries."""
    return COUNTRY_RESOURCES.get(code.strip().upper())
