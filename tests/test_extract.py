"""
Tests for the OCR text → job fields extractor
"""
from jobtrack.extract import (
    ExtractionContext,
    compose_notes,
    extract_company,
    extract_fields,
    extract_location,
    extract_salary,
    extract_title,
    resolve_fallbacks,
    split_lines,
)
from jobtrack.extract.rules import COMPANY_RULES, SALARY_RULES, TITLE_RULES, scan

INDONESIAN_POSTING = (
    "PT Teknologi Maju\n"
    "Software Engineer\n"
    "Jakarta, Indonesia\n"
    "Rp 8.000.000 - Rp 12.000.000\n"
    "Kirim CV ke hr@contoh.com"
)


class TestSplitLines:
    """Tests for the line splitter"""

    def test_trims_and_drops_short_lines(self):
        text = "  a\n\nabc \r\n  xy  \n  Software Engineer  "
        assert split_lines(text) == ["abc", "Software Engineer"]

    def test_keeps_duplicates_and_order(self):
        assert split_lines("Remote\nJakarta\nRemote") == ["Remote", "Jakarta", "Remote"]

    def test_empty_input(self):
        assert split_lines("") == []
        assert split_lines("\n \n--\n") == []


class TestCompany:
    """Tests for the legal-entity company rules"""

    def test_pt_prefix_takes_whole_line(self):
        assert extract_company(["Lowongan Kerja", "PT. Sinar Jaya Abadi"]) == "PT. Sinar Jaya Abadi"

    def test_cv_prefix_is_case_insensitive(self):
        assert extract_company(["cv maju mundur"]) == "cv maju mundur"

    def test_prefix_needs_whitespace(self):
        assert extract_company(["Ptolemy Systems"]) == ""

    def test_international_suffix(self):
        assert extract_company(["Senior Engineer", "Globex Corporation"]) == "Globex Corporation"
        assert extract_company(["Acme Inc."]) == "Acme Inc."
        assert extract_company(["Initech GmbH"]) == "Initech GmbH"

    def test_suffix_must_end_the_line(self):
        assert extract_company(["Solutions architect wanted"]) == ""

    def test_suffix_may_be_glued_to_the_name(self):
        assert extract_company(["TechCorp."]) == "TechCorp."
        assert extract_company(["MegaCorporation"]) == "MegaCorporation"

    def test_legal_prefix_beats_earlier_suffix_line(self):
        assert extract_company(["Umbrella Group", "PT Maju"]) == "PT Maju"

    def test_earliest_suffix_line_wins_without_prefix(self):
        assert extract_company(["Senior Engineer", "Umbrella Group", "Globex Corporation"]) == "Umbrella Group"

    def test_rule_order(self):
        assert [r.name for r in COMPANY_RULES] == ["company.id_legal_prefix", "company.legal_suffix"]


class TestTitle:
    """Tests for the title rule chain"""

    def test_vocabulary_match_takes_whole_line(self):
        ctx = ExtractionContext()
        assert extract_title(["Urgently: Frontend Developer (React)"], ctx) == "Urgently: Frontend Developer (React)"

    def test_family_order_within_line(self):
        assert scan(["Senior Data Scientist"], TITLE_RULES)[1] == "title.role_vocabulary"
        assert scan(["Senior Engineer"], TITLE_RULES)[1] == "title.generic_role"
        assert scan(["Teknisi Listrik"], TITLE_RULES)[1] == "title.id_role"

    def test_skips_claimed_company_line(self):
        lines = ["PT Software Developer Nusantara", "Backend Developer"]
        ctx = ExtractionContext(claimed_company=lines[0])
        assert extract_title(lines, ctx) == "Backend Developer"
        assert extract_title(lines, ExtractionContext()) == lines[0]

    def test_labeled_line_when_no_role_found(self):
        ctx = ExtractionContext()
        assert extract_title(["Posisi: Staff Gudang", "Surabaya"], ctx) == "Staff Gudang"

    def test_role_beats_label(self):
        ctx = ExtractionContext()
        assert extract_title(["Position: Barista", "IT Support"], ctx) == "IT Support"

    def test_nothing_found(self):
        assert extract_title(["Starbucks", "Remote"], ExtractionContext()) == ""


class TestLocation:
    """Tests for the location rules"""

    def test_labeled(self):
        assert extract_location(["Location: Kuala Lumpur"]) == "Kuala Lumpur"
        assert extract_location(["Lokasi : Bekasi Timur"]) == "Bekasi Timur"

    def test_label_wins_over_city_on_same_line(self):
        assert extract_location(["Office: Jakarta Selatan"]) == "Jakarta Selatan"

    def test_city_takes_whole_line(self):
        assert extract_location(["Software Engineer", "Bandung, Jawa Barat"]) == "Bandung, Jawa Barat"

    def test_city_inside_company_name_is_skipped(self):
        assert extract_location(["PT. Bank Jakarta", "Remote"]) == "Remote"

    def test_work_mode(self):
        assert extract_location(["Work From Home"]) == "Work From Home"
        assert extract_location(["Fully on-site role"]) == "Fully on-site role"
        assert extract_location(["Remotely"]) == ""

    def test_no_match(self):
        assert extract_location(["Kuala Lumpur"]) == ""


class TestSalary:
    """Tests for the salary rules"""

    def test_rupiah_range(self):
        assert extract_salary(["Rp 8.000.000 - Rp 12.000.000"]) == "Rp 8.000.000 - Rp 12.000.000"

    def test_rupiah_takes_only_matched_text(self):
        assert extract_salary(["Gaji: Rp 5.000.000 - 7.000.000 per bulan"]) == "Rp 5.000.000 - 7.000.000"

    def test_rupiah_scale_suffix(self):
        assert extract_salary(["IDR 10jt nett"]) == "IDR 10jt"
        assert extract_salary(["Rp 4,5 juta"]) == "Rp 4,5 juta"

    def test_rupiah_beats_label(self):
        assert extract_salary(["Salary: IDR 9.000.000"]) == "IDR 9.000.000"

    def test_labeled(self):
        assert extract_salary(["Salary: 5000"]) == "Salary: 5000"

    def test_usd(self):
        assert extract_salary(["Pay $80,000 - $120,000 per year"]) == "$80,000 - $120,000 per year"
        assert extract_salary(["$5k/month"]) == "$5k/month"

    def test_bare_range(self):
        assert extract_salary(["Kisaran 10 - 15 juta"]) == "10 - 15 juta"

    def test_first_matching_line_wins(self):
        assert extract_salary(["Benefits: BPJS", "$3,000/month", "Rp 9.000.000"]) == "$3,000/month"

    def test_corp_is_not_rupiah(self):
        assert extract_salary(["Globex Corp 2024"]) == ""

    def test_rule_order(self):
        assert [r.name for r in SALARY_RULES] == [
            "salary.rupiah", "salary.labeled", "salary.usd", "salary.bare_range",
        ]


class TestFallbacks:
    """Tests for the last-resort company/title heuristics"""

    def test_company_skips_stoplist_short_and_lowercase(self):
        lines = ["Hiring now!!", "Lowongan kerja", "Acme", "toko kopi", "Bright Future Studio"]
        company, _ = resolve_fallbacks(lines, "", "")
        assert company == "Bright Future Studio"

    def test_company_truncated(self):
        long_line = "Very Long Company Name " * 4
        company, _ = resolve_fallbacks([long_line.strip()], "", "")
        assert company == long_line.strip()[:50]
        assert len(company) == 50

    def test_title_from_hiring_label(self):
        _, title = resolve_fallbacks(["We are looking for: Barista Kopi"], "Kopi Kenangan", "")
        assert title == "Barista Kopi"

    def test_title_keyword_at_end_takes_whole_line(self):
        _, title = resolve_fallbacks(["Barista dibutuhkan", "Kopi Kenangan"], "Kopi Kenangan", "")
        assert title == "Barista dibutuhkan"

    def test_positional_last_resort(self):
        company, title = resolve_fallbacks(["toko roti makmur", "barista pagi"], "", "")
        assert company == "toko roti makmur"
        assert title == "barista pagi"

    def test_second_line_equal_to_company_is_not_a_title(self):
        company, title = resolve_fallbacks(["xyz", "Globex Mart", "nothing here"], "", "")
        assert company == "Globex Mart"
        assert title == ""

    def test_truncated_second_line_equal_to_company_is_not_a_title(self):
        long_line = "Bright Future Studio Internasional Dan Kawan Kawan Sejahtera"
        company, title = resolve_fallbacks(["lorem ipsum", long_line, "open daily"], "", "")
        assert company == long_line[:50]
        assert title == ""

    def test_existing_values_are_kept(self):
        assert resolve_fallbacks(["Other Co", "Other Title"], "Mine", "Role") == ("Mine", "Role")

    def test_no_lines(self):
        assert resolve_fallbacks([], "", "") == ("", "")


class TestNotes:
    """Tests for the notes excerpt"""

    def test_short_text_verbatim(self):
        assert compose_notes("hello") == "Extracted from image:\nhello"

    def test_exactly_limit_has_no_ellipsis(self):
        text = "x" * 500
        assert compose_notes(text) == "Extracted from image:\n" + text

    def test_long_text_truncated_with_ellipsis(self):
        text = "y" * 501
        assert compose_notes(text) == "Extracted from image:\n" + "y" * 500 + "..."

    def test_empty_text_still_has_prefix(self):
        assert compose_notes("") == "Extracted from image:\n"


class TestExtractFields:
    """End-to-end extraction"""

    def test_indonesian_posting(self):
        fields = extract_fields(INDONESIAN_POSTING)
        assert fields.company == "PT Teknologi Maju"
        assert fields.title == "Software Engineer"
        assert fields.location == "Jakarta, Indonesia"
        assert fields.salary == "Rp 8.000.000 - Rp 12.000.000"
        assert fields.notes == "Extracted from image:\n" + INDONESIAN_POSTING

    def test_hiring_label_and_work_mode(self):
        fields = extract_fields("Hiring: Barista\nStarbucks\nRemote")
        assert fields.title == "Barista"
        assert fields.company == "Starbucks"
        assert fields.location == "Remote"
        assert fields.salary == ""

    def test_fallback_company_never_reused_as_title(self):
        fields = extract_fields("xyz\nGlobex Mart\nopen daily")
        assert fields.company == "Globex Mart"
        assert fields.title == ""

    def test_long_fallback_company_never_reused_as_title(self):
        fields = extract_fields(
            "lorem ipsum\nBright Future Studio Internasional Dan Kawan Kawan Sejahtera\nopen daily"
        )
        assert fields.company == "Bright Future Studio Internasional Dan Kawan Kawan"
        assert fields.title == ""

    def test_legal_prefix_company_on_a_later_line(self):
        fields = extract_fields("Acme Inc.\nPT Teknologi Maju\nSoftware Engineer")
        assert fields.company == "PT Teknologi Maju"
        assert fields.title == "Software Engineer"

    def test_single_line(self):
        fields = extract_fields("Globex Mart")
        assert fields.company == "Globex Mart"
        assert fields.title == ""

    def test_empty_text(self):
        fields = extract_fields("")
        assert fields.as_dict() == {
            "title": "", "company": "", "location": "", "salary": "",
            "notes": "Extracted from image:\n",
        }

    def test_deterministic(self):
        text = "Dibutuhkan Segera\nCV. Sinar Abadi\nPosisi: Teknisi Jaringan\nLokasi: Bekasi\nGaji Rp 4,5 juta"
        first = extract_fields(text)
        assert extract_fields(text) == first
        assert first.company == "CV. Sinar Abadi"
        assert first.title == "Posisi: Teknisi Jaringan"
        assert first.location == "Bekasi"
        assert first.salary == "Rp 4,5 juta"
