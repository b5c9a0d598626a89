# Rounding worksheet: round each number to the nearest ten (or hundred).
DEFAULT_QUESTIONS = [
    {'id': 'q1', 'question': '17', 'correct_answer': '20', 'choices': ['10', '20', '17']},
    {'id': 'q2', 'question': '75', 'correct_answer': '80', 'choices': ['70', '80', '75']},
    {'id': 'q3', 'question': '64', 'correct_answer': '60', 'choices': ['64', '70', '60']},
    {'id': 'q4', 'question': '98', 'correct_answer': '100', 'choices': ['80', '100', '98']},
    {'id': 'q5', 'question': '94', 'correct_answer': '90', 'choices': ['100', '94', '90']},
    {'id': 'q6', 'question': '445', 'correct_answer': '450', 'choices': ['450', '440', '500']},
    {'id': 'q7', 'question': '45', 'correct_answer': '50', 'choices': ['50', '45', '40']},
    {'id': 'q8', 'question': '19', 'correct_answer': '20', 'choices': ['20', '10', '19']},
    {'id': 'q9', 'question': '0', 'correct_answer': '0', 'choices': ['10', '1', '0']},
    {'id': 'q10', 'question': '199', 'correct_answer': '200', 'choices': ['190', '100', '200']},
    {'id': 'q11', 'question': '165', 'correct_answer': '170', 'choices': ['160', '170', '150']},
    {'id': 'q12', 'question': '999', 'correct_answer': '1000', 'choices': ['990', '1000', '909']},
]
