"""
Unit tests for experience estimation and the local resume / job description heuristics.
"""

import unittest
from datetime import date

from models import WorkPeriod
from resume_parser import (
    estimate_experience_years,
    extract_education,
    extract_job_details,
    extract_job_title,
    extract_required_experience,
    extract_responsibilities,
    extract_resume_details,
    find_date_ranges,
    merge_work_periods,
    period_months,
    round_half_up,
)

TODAY = date(2024, 6, 15)

SAMPLE_RESUME = """
Priya Sharma
Email: priya.sharma@gmail.com | Phone: +91 98765 43211
Senior Python Developer with 6 years of experience.

SKILLS
Python, Django, PostgreSQL, Docker, AWS

EDUCATION
B.Tech in Computer Science, NIT Trichy, 2017
"""

SAMPLE_JOB = """
Job Title: Backend Engineer
Required Skills: Python, Django, REST API
Minimum 3 years of experience.
Responsibilities:
- Build services
- Mentor engineers
"""


class TestMergeWorkPeriods(unittest.TestCase):

    def test_adjacent_periods_merge(self):
        merged = merge_work_periods([
            WorkPeriod(date(2020, 7, 15), date(2020, 12, 31)),
            WorkPeriod(date(2020, 1, 1), date(2020, 6, 30)),
        ])
        self.assertEqual(merged, [WorkPeriod(date(2020, 1, 1), date(2020, 12, 31))])

    def test_contained_period_does_not_shorten(self):
        merged = merge_work_periods([
            WorkPeriod(date(2019, 1, 1), date(2020, 12, 31)),
            WorkPeriod(date(2019, 6, 1), date(2019, 9, 1)),
        ])
        self.assertEqual(merged, [WorkPeriod(date(2019, 1, 1), date(2020, 12, 31))])

    def test_gap_over_thirty_days_kept_apart(self):
        periods = [
            WorkPeriod(date(2018, 1, 1), date(2018, 12, 31)),
            WorkPeriod(date(2019, 3, 1), date(2019, 12, 31)),
        ]
        self.assertEqual(len(merge_work_periods(periods)), 2)

    def test_gap_of_exactly_thirty_days_merges(self):
        # Jan 31 to Mar 1 2020 is 30 days
        merged = merge_work_periods([
            WorkPeriod(date(2019, 6, 1), date(2020, 1, 31)),
            WorkPeriod(date(2020, 3, 1), date(2020, 9, 30)),
        ])
        self.assertEqual(merged, [WorkPeriod(date(2019, 6, 1), date(2020, 9, 30))])

    def test_gap_of_thirty_one_days_kept_apart(self):
        merged = merge_work_periods([
            WorkPeriod(date(2019, 6, 1), date(2020, 1, 31)),
            WorkPeriod(date(2020, 3, 2), date(2020, 9, 30)),
        ])
        self.assertEqual(len(merged), 2)

    def test_empty(self):
        self.assertEqual(merge_work_periods([]), [])

    def test_inclusive_months(self):
        self.assertEqual(period_months(WorkPeriod(date(2020, 1, 1), date(2020, 12, 31))), 12)
        self.assertEqual(period_months(WorkPeriod(date(2020, 6, 1), date(2020, 6, 1))), 1)


class TestEstimateExperience(unittest.TestCase):

    def test_explicit_statement_wins(self):
        self.assertEqual(estimate_experience_years("Over 5+ years of experience in Python"), "5")
        self.assertEqual(estimate_experience_years("Total experience: 8 years. 3 years in Java"), "8")

    def test_adjacent_numeric_periods_merge(self):
        text = "01/2018 - 06/2020, 07/2020 - Present"
        # Jan 2018 .. Jun 2024 is 78 months, 6.5 years, rounded half-up
        self.assertEqual(estimate_experience_years(text, today=TODAY), "7")

    def test_gap_periods_are_summed(self):
        text = "Acme Corp  Jan 2015 - Dec 2016\nGlobex  Mar 2019 - Feb 2021"
        self.assertEqual(estimate_experience_years(text, today=TODAY), "4")

    def test_double_hyphen_range_separator(self):
        self.assertEqual(estimate_experience_years("Analyst, Acme (2019 -- 2023)", today=TODAY), "4")

    def test_single_bare_year_range(self):
        self.assertEqual(estimate_experience_years("Software Engineer, Acme (2019 - 2023)", today=TODAY), "4")
        self.assertEqual(estimate_experience_years("Analyst 2019 to present", today=TODAY), "5")

    def test_reversed_period_discarded(self):
        self.assertEqual(estimate_experience_years("06/2022 - 01/2020", today=TODAY), "")

    def test_no_dates(self):
        self.assertEqual(estimate_experience_years("Fresh graduate looking for a role"), "")
        self.assertEqual(estimate_experience_years(""), "")

    def test_month_range_claims_its_year(self):
        ranges = find_date_ranges("Jan 2018 - Present", today=TODAY)
        self.assertEqual(len(ranges), 1)
        self.assertEqual(ranges[0].kind, 'month')
        self.assertEqual(ranges[0].period, WorkPeriod(date(2018, 1, 1), TODAY))

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(2.49), 2)


class TestRequiredExperience(unittest.TestCase):

    def test_minimum(self):
        self.assertEqual(extract_required_experience("Minimum 3+ years of experience in Java"), "3")

    def test_range_reads_lower_bound(self):
        self.assertEqual(extract_required_experience("3-5 years of experience with AWS"), "3")

    def test_labelled(self):
        self.assertEqual(extract_required_experience("Experience: 4 years"), "4")

    def test_missing(self):
        self.assertEqual(extract_required_experience("Great team, great perks"), "")


class TestSections(unittest.TestCase):

    def test_education_section(self):
        text = "John Smith\nEDUCATION\nB.Tech in Computer Science\nXYZ University, 2020\n\nSKILLS\nPython"
        self.assertEqual(extract_education(text), "B.Tech in Computer Science, XYZ University, 2020")

    def test_inline_education_heading(self):
        self.assertEqual(extract_education("Education: MBA, IIM Ahmedabad"), "MBA, IIM Ahmedabad")

    def test_degree_line_fallback(self):
        text = "Jane Roe\nCompleted Bachelor of Science in Physics at MIT"
        self.assertEqual(extract_education(text), "Completed Bachelor of Science in Physics at MIT")

    def test_no_education(self):
        self.assertEqual(extract_education("Jane Roe\nLoves hiking"), "")

    def test_job_title(self):
        self.assertEqual(extract_job_title("Job Title: Senior Backend Engineer\nLocation: Pune"),
                         "Senior Backend Engineer")
        self.assertEqual(extract_job_title("Senior Python Developer\nWe are hiring now"), "Senior Python Developer")
        self.assertEqual(extract_job_title("We are looking for a Data Scientist to join us"), "Data Scientist")

    def test_responsibilities(self):
        text = ("Backend Engineer\nResponsibilities:\n- Design REST APIs\n- Write unit tests\n"
                "• Review code\n\nRequirements:\n- Python")
        self.assertEqual(extract_responsibilities(text),
                         ["Design REST APIs", "Write unit tests", "Review code"])


class TestLocalRecords(unittest.TestCase):

    def test_resume_details(self):
        details = extract_resume_details(SAMPLE_RESUME, "priya.pdf")
        self.assertEqual(details.name, "Priya Sharma")
        self.assertEqual(details.email, "priya.sharma@gmail.com")
        self.assertEqual(details.phone, "+919876543211")
        self.assertEqual(details.skills, ["Python", "Django", "PostgreSQL", "AWS", "Docker"])
        self.assertEqual(details.experience, "6")
        self.assertEqual(details.education, "B.Tech in Computer Science, NIT Trichy, 2017")
        self.assertEqual(details.file_name, "priya.pdf")
        self.assertFalse(details.incomplete)

    def test_job_details(self):
        details = extract_job_details(SAMPLE_JOB, "backend.txt")
        self.assertEqual(details.title, "Backend Engineer")
        for skill in ("Python", "Django", "REST API"):
            self.assertIn(skill, details.skills)
        self.assertEqual(details.experience, "3")
        self.assertEqual(details.responsibilities, ["Build services", "Mentor engineers"])


if __name__ == '__main__':
    unittest.main()
