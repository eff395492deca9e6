import sys
import asyncio
import argparse

import config
from document_parser import process_batch
from job_matcher import ExperiencePolicy, SkillBandPolicy, rank_candidates
from models import DocumentKind
from report import build_pdf_report, report_rows


def _read_files(paths):
    files = []
    for path in paths:
        with open(path, "rb") as f:
            files.append((path, f.read()))
    return files


def build_parser():
    parser = argparse.ArgumentParser(description="Rank resumes against one or more job descriptions.")
    parser.add_argument('--jd', nargs='+', required=True, metavar='FILE', help="job description files")
    parser.add_argument('--resume', nargs='+', required=True, metavar='FILE', help="resume files (.pdf, .txt, .docx)")
    parser.add_argument('--skill-policy', choices=[p.value for p in SkillBandPolicy],
                        default=SkillBandPolicy.QUALIFIED_TIERED.value)
    parser.add_argument('--experience-policy', choices=[p.value for p in ExperiencePolicy],
                        default=ExperiencePolicy.AT_LEAST.value)
    parser.add_argument('--report', metavar='PATH', help="also write a PDF report here")
    parser.add_argument('--log-level', default=None)
    return parser


async def _parse(jd_files, resume_files):
    jobs = await process_batch(jd_files, DocumentKind.JOB_REQUIREMENT)
    resumes = await process_batch(resume_files, DocumentKind.RESUME)
    return jobs, resumes


def main(argv=None):
    args = build_parser().parse_args(argv)
    config.configure_logging(args.log_level)

    # 1st read the files
    try:
        jd_files = _read_files(args.jd)
        resume_files = _read_files(args.resume)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        return 1

    # 2nd extract details from every document
    jobs, resumes = asyncio.run(_parse(jd_files, resume_files))
    if not jobs or not resumes:
        print("Nothing to match: no job description or resume could be parsed.", file=sys.stderr)
        return 1

    # 3rd compare every resume to every job description
    ranked = rank_candidates(resumes, jobs, SkillBandPolicy(args.skill_policy),
                             ExperiencePolicy(args.experience_policy))

    # 4th print the ranking
    for rank, name, file_name, _, _, best, pct, skill_res, years, exp_res, matched in report_rows(ranked):
        print(f"{rank}. {name or file_name} -> {best}: {pct}% ({skill_res}), "
              f"experience {years} ({exp_res}); matched: {matched or '-'}")

    if args.report:
        build_pdf_report(ranked, args.report)
        print(f"Report written to {args.report}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
