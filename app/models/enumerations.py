from enum import Enum

class ActivityCategory(str, Enum):
    RESEARCH = "research"
    CONFERENCES = "conferences"
    POSITIONS = "positions"
    PUBLICATIONS = "publications"
    COURSES = "courses"
    SEMINARS = "seminars"
    WORKSHOPS = "workshops"
    ASSIGNMENTS = "assignments"
    VOLUNTEER_WORK = "volunteerWork"
    COMMITTEES = "committees"
    THANK_YOU_BOOKS = "thankYouBooks"
    SUPERVISION = "supervision"
    SCIENTIFIC_EVALUATIONS = "scientificEvaluations"
    JOURNAL_MEMBERSHIPS = "journalMemberships"

class ScopusQuartile(str, Enum):
    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"

class RankingCriterion(str, Enum):
    ACADEMIC_TITLE = "academicTitle"
    PUBLISHED_RESEARCH = "publishedResearch"
    GLOBAL_RESEARCH = "globalResearch"
    CONFERENCES = "conferences"
    SEMINARS_AND_COURSES = "seminarsAndCourses"
    COMMITTEES = "committees"
    VOLUNTEER_WORK = "volunteerWork"
    THANK_YOU_BOOKS = "thankYouBooks"
