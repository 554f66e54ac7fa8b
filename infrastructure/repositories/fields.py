# Attribute names shared by the questions and users tables

# Question topic, the partition key of the questions table
TOPIC = "topic"
# Subscribed topics as a String Set
TOPICS = "topics"
# Question ID, the sort key of the questions table
QID = "qid"
UPDATED = "updated"
# The full question as JSON
DETAILS = "details"
AUTHOR = "author"
STAGE = "stage"
TITLE = "title"
# History of interactions as a String Set of AskedQuestion values
QUESTIONS = "questions"
EMAIL = "email"
SORT_KEY = "sk"
UNSUBSCRIBE = "unsubscribe"

# Interaction counters of a question
QUESTION_STATS_CORRECT = "stats_correct"
QUESTION_STATS_INCORRECT = "stats_incorrect"
QUESTION_STATS_SKIPPED = "stats_skipped"
