"""
Rule tables for the rule-based parsers.

Pure data. Each table is an ordered list of (patterns, Taxonomy) and is read
top to bottom, first match wins, so more specific rules sit above the general
ones they overlap with (country code above phone, graduation year above
graduation date).
"""

import re
from typing import Dict, List, Pattern, Sequence, Tuple

from autofill.types import Taxonomy

Rule = Tuple[List[Pattern], Taxonomy]


def _rules(table: Sequence[Tuple[Sequence[str], Taxonomy]]) -> List[Rule]:
    return [([re.compile(p, re.I) for p in patterns], t) for patterns, t in table]


AUTOCOMPLETE_MAP: Dict[str, Taxonomy] = {
    "name": Taxonomy.FULL_NAME,
    "given-name": Taxonomy.FIRST_NAME,
    "family-name": Taxonomy.LAST_NAME,
    "email": Taxonomy.EMAIL,
    "tel": Taxonomy.PHONE,
    "tel-national": Taxonomy.PHONE,
    "tel-country-code": Taxonomy.COUNTRY_CODE,
    "address-level2": Taxonomy.CITY,
    "address-level1": Taxonomy.LOCATION,
    "country-name": Taxonomy.LOCATION,
    "country": Taxonomy.LOCATION,
    "url": Taxonomy.PORTFOLIO,
    "organization": Taxonomy.COMPANY_NAME,
    "organization-title": Taxonomy.JOB_TITLE,
    "sex": Taxonomy.EEO_GENDER,
}

TYPE_MAP: Dict[str, Taxonomy] = {
    "email": Taxonomy.EMAIL,
    "tel": Taxonomy.PHONE,
    "url": Taxonomy.PORTFOLIO,
}

# Tested against "<name> <id>", lowercased, so camelCase words run together
# ("schoolName" -> "schoolname"). Short tokens like fname/lname are anchored
# to keep them from matching inside longer words.
NAME_ID_RULES: List[Rule] = _rules(
    [
        ([r"full.?name", r"legal.?name", r"^name$", r"your.?name"], Taxonomy.FULL_NAME),
        ([r"first.?name", r"given.?name", r"(?<![a-z])f_?name(?![a-z])"], Taxonomy.FIRST_NAME),
        ([r"last.?name", r"family.?name", r"sur.?name", r"(?<![a-z])l_?name(?![a-z])"], Taxonomy.LAST_NAME),
        ([r"e.?mail", r"email.?address"], Taxonomy.EMAIL),
        ([r"country.?code", r"dial.?code"], Taxonomy.COUNTRY_CODE),
        ([r"phone", r"mobile", r"tel", r"cell"], Taxonomy.PHONE),
        ([r"city", r"town"], Taxonomy.CITY),
        ([r"location", r"address", r"country"], Taxonomy.LOCATION),
        ([r"linkedin"], Taxonomy.LINKEDIN),
        ([r"github"], Taxonomy.GITHUB),
        ([r"portfolio", r"website", r"personal.?site"], Taxonomy.PORTFOLIO),
        ([r"school", r"university", r"college", r"institution"], Taxonomy.SCHOOL),
        ([r"degree"], Taxonomy.DEGREE),
        ([r"major", r"field.?of.?study", r"concentration"], Taxonomy.MAJOR),
        ([r"gpa", r"grade.?point"], Taxonomy.GPA),
        ([r"grad\w*.?year", r"year.?of.?grad"], Taxonomy.GRAD_YEAR),
        ([r"grad\w*.?month"], Taxonomy.GRAD_MONTH),
        ([r"grad.?date", r"graduation", r"expected.?grad"], Taxonomy.GRAD_DATE),
        ([r"start.?date", r"from.?date", r"begin"], Taxonomy.START_DATE),
        ([r"end.?date", r"to.?date"], Taxonomy.END_DATE),
        ([r"company", r"employer", r"organi[sz]ation"], Taxonomy.COMPANY_NAME),
        ([r"job.?title", r"position", r"occupation"], Taxonomy.JOB_TITLE),
        ([r"work.?auth", r"authorized", r"eligible.?to.?work"], Taxonomy.WORK_AUTH),
        ([r"sponsor", r"visa"], Taxonomy.NEED_SPONSORSHIP),
        ([r"resume", r"cv", r"cover.?letter"], Taxonomy.RESUME_TEXT),
        ([r"salary", r"compensation", r"pay", r"wage"], Taxonomy.SALARY),
        ([r"gender", r"sex"], Taxonomy.EEO_GENDER),
        ([r"ethnic", r"race"], Taxonomy.EEO_ETHNICITY),
        ([r"veteran", r"military"], Taxonomy.EEO_VETERAN),
        ([r"disab", r"handicap"], Taxonomy.EEO_DISABILITY),
        ([r"ssn", r"social.?security", r"gov.?id", r"national.?id"], Taxonomy.GOV_ID),
    ]
)

# Tested against the normalized label text (lowercase, trailing "*" / ":" removed).
LABEL_RULES: List[Rule] = _rules(
    [
        (
            [r"authorized\s*to\s*work", r"work\s*authori[sz]ation", r"legally\s*work", r"eligible\s*to\s*work", r"工作授权"],
            Taxonomy.WORK_AUTH,
        ),
        ([r"first\s*name", r"given\s*name", r"^名$"], Taxonomy.FIRST_NAME),
        ([r"last\s*name", r"family\s*name", r"surname", r"^姓$", r"^姓氏$"], Taxonomy.LAST_NAME),
        ([r"full\s*name", r"^name$", r"your\s+name", r"legal\s+name", r"姓名", r"^名字$"], Taxonomy.FULL_NAME),
        ([r"e-?mail", r"email\s*address", r"邮箱", r"电子邮件"], Taxonomy.EMAIL),
        ([r"country\s*code", r"dial\s*code", r"区号", r"国家代码"], Taxonomy.COUNTRY_CODE),
        ([r"phone", r"mobile", r"telephone", r"contact\s*number", r"电话", r"手机"], Taxonomy.PHONE),
        ([r"^city$", r"city\s*/?\s*town", r"城市"], Taxonomy.CITY),
        ([r"^location$", r"^country$", r"^state$", r"^province$", r"所在地"], Taxonomy.LOCATION),
        ([r"linkedin"], Taxonomy.LINKEDIN),
        ([r"github"], Taxonomy.GITHUB),
        ([r"portfolio", r"website", r"personal\s*site", r"web\s*page", r"个人网站"], Taxonomy.PORTFOLIO),
        ([r"school", r"university", r"college", r"institution", r"alma\s*mater", r"学校", r"大学"], Taxonomy.SCHOOL),
        ([r"degree", r"qualification", r"学历", r"学位"], Taxonomy.DEGREE),
        ([r"major", r"field\s*of\s*study", r"specialization", r"concentration", r"专业"], Taxonomy.MAJOR),
        ([r"\bgpa\b", r"grade\s*point", r"绩点"], Taxonomy.GPA),
        ([r"graduation\s*year", r"year\s*of\s*graduation", r"毕业年份"], Taxonomy.GRAD_YEAR),
        ([r"graduation\s*month", r"毕业月份"], Taxonomy.GRAD_MONTH),
        ([r"graduation", r"grad\s*date", r"expected\s*grad", r"completion\s*date", r"毕业"], Taxonomy.GRAD_DATE),
        ([r"start\s*date", r"from\s*date", r"began", r"started", r"开始时间", r"入职时间"], Taxonomy.START_DATE),
        ([r"end\s*date", r"to\s*date", r"ended", r"finished", r"结束时间", r"离职时间"], Taxonomy.END_DATE),
        ([r"company", r"employer", r"organi[sz]ation", r"公司"], Taxonomy.COMPANY_NAME),
        ([r"job\s*title", r"position", r"职位"], Taxonomy.JOB_TITLE),
        ([r"job\s*description", r"responsibilit", r"工作描述"], Taxonomy.JOB_DESCRIPTION),
        ([r"skills?\b", r"技能"], Taxonomy.SKILLS),
        ([r"sponsor", r"visa", r"immigration", r"签证担保"], Taxonomy.NEED_SPONSORSHIP),
        ([r"resume", r"\bcv\b", r"cover\s*letter", r"简历"], Taxonomy.RESUME_TEXT),
        ([r"summary", r"about\s*(yourself|you|me)", r"个人简介", r"自我介绍"], Taxonomy.SUMMARY),
        ([r"salary", r"compensation", r"expected\s*pay", r"desired\s*salary", r"薪资", r"期望薪"], Taxonomy.SALARY),
        ([r"gender", r"\bsex\b", r"性别"], Taxonomy.EEO_GENDER),
        ([r"ethnic", r"\brace\b", r"racial", r"种族", r"民族"], Taxonomy.EEO_ETHNICITY),
        ([r"veteran", r"military\s*service", r"served", r"退伍"], Taxonomy.EEO_VETERAN),
        ([r"disability", r"handicap", r"impairment", r"残疾"], Taxonomy.EEO_DISABILITY),
        ([r"\bssn\b", r"social\s*security", r"national\s*id", r"身份证"], Taxonomy.GOV_ID),
    ]
)

_EDUCATION = re.compile(r"education|教育", re.I)
_EQUAL_OPPORTUNITY = re.compile(r"equal|平等", re.I)

# A label match gets the section boost when the section title matches.
SECTION_BOOSTS: Dict[Taxonomy, Pattern] = {
    Taxonomy.SCHOOL: _EDUCATION,
    Taxonomy.DEGREE: _EDUCATION,
    Taxonomy.MAJOR: _EDUCATION,
    Taxonomy.START_DATE: _EDUCATION,
    Taxonomy.END_DATE: _EDUCATION,
    Taxonomy.GRAD_DATE: _EDUCATION,
    Taxonomy.GRAD_YEAR: _EDUCATION,
    Taxonomy.GRAD_MONTH: _EDUCATION,
    Taxonomy.EEO_GENDER: _EQUAL_OPPORTUNITY,
    Taxonomy.EEO_ETHNICITY: _EQUAL_OPPORTUNITY,
    Taxonomy.EEO_VETERAN: _EQUAL_OPPORTUNITY,
    Taxonomy.EEO_DISABILITY: _EQUAL_OPPORTUNITY,
}


def first_match(rules: Sequence[Rule], text: str):
    """(Taxonomy, pattern source) of the first rule matching `text`, or None."""
    for patterns, taxonomy in rules:
        for pattern in patterns:
            if pattern.search(text):
                return taxonomy, pattern.pattern
    return None
