from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from random import Random
from datetime import timedelta
from decimal import Decimal

from schools.models import School
from academics.models import ClassRoom, Section, Subject, StudentProfile, Teacher
from results.models import Examination, Grade
from finance.models import Expense, Income, Payroll, Fee

FIRST_NAMES = ['Abebe', 'Almaz', 'Bekele', 'Chaltu', 'Dawit', 'Eden', 'Fikir', 'Genet', 'Hana', 'Kebede', 'Lulit', 'Meron']
SUBJECT_NAMES = ['Mathematics', 'English', 'Science', 'Social Studies', 'Amharic', 'ICT']
EXAM_NAMES = ['Mid Term', 'Final Exam']


class Command(BaseCommand):
    help = "Seed demo data for a school: classrooms, sections, subjects, teachers, students, exams, grades, fees and finance records"

    def add_arguments(self, parser):
        parser.add_argument('--school-id', type=int, help='Existing School ID to seed data for')
        parser.add_argument('--create-school', action='store_true', help='Create a new demo school if school-id not provided')
        parser.add_argument('--school-name', type=str, default='Demo School', help='Name for the demo school (if creating)')
        parser.add_argument('--academic-year', type=str, default='2024-2025', help='Academic year for a newly created school')
        parser.add_argument('--students', type=int, default=20, help='Number of students to create')
        parser.add_argument('--teachers', type=int, default=5, help='Number of teachers to create')
        parser.add_argument('--classes', type=int, default=3, help='Number of classrooms to create')
        parser.add_argument('--sections-per-class', type=int, default=2, help='Number of sections per classroom')
        parser.add_argument('--subjects', type=int, default=4, help='Number of subjects to create')
        parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible data')

    def handle(self, *args, **options):
        school_id = options.get('school_id')
        create_school = options.get('create_school')
        school_name = options.get('school_name')
        num_students = options.get('students')
        num_teachers = options.get('teachers')
        num_classes = options.get('classes')
        sections_per_class = options.get('sections_per_class')
        num_subjects = min(options.get('subjects'), len(SUBJECT_NAMES))
        rng = Random(options.get('seed'))

        # Resolve or create school
        school = None
        if school_id:
            try:
                school = School.objects.get(id=school_id)
            except School.DoesNotExist:
                if create_school:
                    school = School.objects.create(id=school_id, name=school_name, academic_year=options['academic_year'])
                    self.stdout.write(self.style.WARNING(f"Created new School with id={school.id} name={school.name}"))
                else:
                    raise CommandError(f"School with id={school_id} does not exist. Use --create-school to create it.")
        else:
            if create_school:
                school = School.objects.create(name=school_name, academic_year=options['academic_year'])
                self.stdout.write(self.style.WARNING(f"Created new School with id={school.id} name={school.name}"))
            else:
                raise CommandError("Provide --school-id or use --create-school to create a demo school.")

        classrooms = []
        for i in range(1, num_classes + 1):
            cls, _ = ClassRoom.objects.get_or_create(school=school, name=f"Class {i}")
            classrooms.append(cls)
        self.stdout.write(self.style.SUCCESS(f"Classrooms: {len(classrooms)}"))

        # Sections per classroom (A, B, C ...)
        section_names = [chr(ord('A') + i) for i in range(sections_per_class)]
        for cls in classrooms:
            for sname in section_names:
                Section.objects.get_or_create(classroom=cls, name=sname)

        subjects = []
        for name in SUBJECT_NAMES[:num_subjects]:
            sub, _ = Subject.objects.get_or_create(school=school, name=name)
            subjects.append(sub)
        self.stdout.write(self.style.SUCCESS(f"Subjects: {len(subjects)}"))

        today = timezone.localdate()
        teachers = []
        for i in range(1, num_teachers + 1):
            teacher, _ = Teacher.objects.get_or_create(
                school=school,
                name=f"Teacher {i}",
                defaults={
                    'subject': subjects[(i - 1) % len(subjects)].name if subjects else '',
                    'salary': Decimal(rng.choice([8000, 9500, 11000, 12500])),
                    'join_date': today - timedelta(days=365 * rng.randint(1, 8)),
                }
            )
            teachers.append(teacher)
        self.stdout.write(self.style.SUCCESS(f"Teachers: {len(teachers)}"))

        students = []
        for i in range(1, num_students + 1):
            cls = rng.choice(classrooms) if classrooms else None
            sec = None
            if cls:
                sec_list = list(cls.sections.all())
                sec = rng.choice(sec_list) if sec_list else None
            sp, _ = StudentProfile.objects.get_or_create(
                school=school,
                roll_number=str(1000 + i),
                defaults={
                    'name': f"{rng.choice(FIRST_NAMES)} {rng.choice(FIRST_NAMES)}",
                    'classroom': cls,
                    'section': sec,
                }
            )
            students.append(sp)
        self.stdout.write(self.style.SUCCESS(f"Students: {len(students)}"))

        # One paper per subject for each exam name and class, most students graded
        grades_created = 0
        for cls in classrooms:
            class_students = [s for s in students if s.classroom_id == cls.id]
            for offset, exam_name in enumerate(EXAM_NAMES):
                for sub in subjects:
                    exam, _ = Examination.objects.get_or_create(
                        classroom=cls,
                        name=exam_name,
                        subject=sub,
                        defaults={
                            'school': school,
                            'date': today - timedelta(days=60 - offset * 30),
                            'total_marks': 100,
                            'passing_marks': 40,
                            'status': 'completed',
                        }
                    )
                    for sp in class_students:
                        if rng.random() < 0.1:
                            continue  # leave some papers ungraded
                        _, created = Grade.objects.get_or_create(
                            examination=exam,
                            student=sp,
                            defaults={'marks_obtained': rng.randint(20, 100)}
                        )
                        grades_created += int(created)
        self.stdout.write(self.style.SUCCESS(f"Grades created: {grades_created}"))

        month = today.strftime('%B')
        fees_created = 0
        for sp in students:
            fee, created = Fee.objects.get_or_create(
                school=school,
                student=sp,
                month=month,
                defaults={'amount': Decimal('1200.00'), 'description': 'Tuition fee', 'due_date': today.replace(day=10)}
            )
            if created:
                fees_created += 1
                if rng.random() < 0.6:
                    fee.collect(payment_method=rng.choice(['cash', 'bank_transfer', 'mobile_banking']))
        self.stdout.write(self.style.SUCCESS(f"Fees created: {fees_created}"))

        for teacher in teachers:
            Payroll.objects.get_or_create(
                school=school,
                teacher=teacher,
                month=month,
                year=today.year,
                defaults={'bonus': Decimal(rng.choice([0, 500])), 'deductions': Decimal(rng.choice([0, 250]))}
            )
        self.stdout.write(self.style.SUCCESS(f"Payroll records: {len(teachers)}"))

        for category, amount in [('utilities', 3500), ('supplies', 1800), ('maintenance', 2200)]:
            Expense.objects.get_or_create(school=school, title=f"Monthly {category}", date=today, defaults={'category': category, 'amount': Decimal(amount)})
        for category, amount in [('donations', 5000), ('rentals', 2500)]:
            Income.objects.get_or_create(school=school, title=f"{category.title()} income", date=today, defaults={'category': category, 'amount': Decimal(amount)})
        self.stdout.write(self.style.SUCCESS("Expenses and incomes seeded"))

        self.stdout.write(self.style.SUCCESS("Demo data seeding complete."))
