import unittest

from name_extractor import clean_job_title, extract_name, name_from_filename, title_from_filename


class TestExtractName(unittest.TestCase):

    def test_labelled_name(self):
        self.assertEqual(extract_name("Name: Priya Sharma\nEmail: priya@gmail.com"), "Priya Sharma")

    def test_label_stops_before_next_field(self):
        self.assertEqual(extract_name("Name: Arjun Mehta Email: arjun@gmail.com"), "Arjun Mehta")

    def test_first_line_of_capitalized_words(self):
        self.assertEqual(extract_name("John Smith\nSoftware Engineer\njohn@x.com"), "John Smith")

    def test_line_after_cv_header(self):
        self.assertEqual(extract_name("CURRICULUM VITAE\nRahul Verma\nPune, India"), "Rahul Verma")

    def test_line_above_contact_details(self):
        text = "Objective: build things\nAnita Desai\nanita@gmail.com | 9876543211"
        self.assertEqual(extract_name(text), "Anita Desai")

    def test_section_headers_are_not_names(self):
        self.assertIsNone(extract_name("Professional Summary\nExperienced developer"))

    def test_empty_text(self):
        self.assertIsNone(extract_name(""))


class TestFilenameFallbacks(unittest.TestCase):

    def test_name_from_filename(self):
        self.assertEqual(name_from_filename("resume_john_doe.pdf"), "John Doe")
        self.assertEqual(name_from_filename("/uploads/priya-sharma.docx"), "Priya Sharma")

    def test_title_from_filename(self):
        self.assertEqual(title_from_filename("JD-Senior_Python_Developer.docx"), "Senior Python Developer")
        self.assertEqual(title_from_filename("job_description data engineer.txt"), "Data Engineer")

    def test_clean_job_title(self):
        self.assertEqual(clean_job_title("JD - Data Engineer"), "Data Engineer")
        self.assertEqual(clean_job_title("  Backend Engineer "), "Backend Engineer")


if __name__ == '__main__':
    unittest.main()
